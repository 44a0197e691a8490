"""HTTP Basic Auth: bcrypt-based htpasswd files referenced by ``auth_basic_user_file``."""

from __future__ import annotations

from pathlib import Path

import bcrypt

from vhm.errors import AuthError
from vhm.services import naming


def hash_password(password: str) -> str:
    """Generate a bcrypt hash suitable for NGINX htpasswd files."""
    salt = bcrypt.gensalt(rounds=12)
    return bcrypt.hashpw(password.encode(), salt).decode()


def htpasswd_path(auth_dir: Path, vhost: str) -> Path:
    """Return the htpasswd file for a vhost, refusing names that leave ``auth_dir``."""
    if not naming.is_valid_name(vhost):
        raise AuthError(f"Invalid vhost name {vhost!r}")
    return auth_dir / f"{vhost}.htpasswd"


def _read_entries(path: Path) -> dict[str, str]:
    if not path.exists():
        return {}
    entries: dict[str, str] = {}
    for line in path.read_text().splitlines():
        line = line.strip()
        if line and ":" in line:
            user, hashed = line.split(":", 1)
            entries[user] = hashed
    return entries


def _write_entries(path: Path, entries: dict[str, str], mode: int) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("".join(f"{user}:{hashed}\n" for user, hashed in entries.items()))
    path.chmod(mode)


def set_user(path: Path, username: str, password: str, *, mode: int = 0o640) -> bool:
    """Add or replace a user. Returns True if the user was new."""
    if ":" in username or not username:
        raise AuthError(f"Invalid htpasswd username {username!r}")
    entries = _read_entries(path)
    created = username not in entries
    entries[username] = hash_password(password)
    _write_entries(path, entries, mode)
    return created


def remove_user(path: Path, username: str, *, mode: int = 0o640) -> bool:
    """Remove a user. Returns True if the user existed."""
    entries = _read_entries(path)
    if entries.pop(username, None) is None:
        return False
    _write_entries(path, entries, mode)
    return True


def list_users(path: Path) -> list[str]:
    """Return usernames from an htpasswd file, in file order."""
    return list(_read_entries(path))


def check_password(path: Path, username: str, password: str) -> bool:
    hashed = _read_entries(path).get(username)
    if hashed is None:
        return False
    return bcrypt.checkpw(password.encode(), hashed.encode())
