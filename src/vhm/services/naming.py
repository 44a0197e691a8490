"""Names that end up in file names (vhosts, locations, htpasswd files)."""

from __future__ import annotations


def is_valid_name(name: str) -> bool:
    """True when ``name`` is safe to use as a single path component."""
    if not name or name != name.strip():
        return False
    if name.startswith("."):
        return False
    return "/" not in name and "\\" not in name and "\x00" not in name
