"""Load vhost declarations from TOML or JSON files."""

from __future__ import annotations

import json
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from vhm_common import VhostSpec

from vhm.errors import SpecFileError


def _parse(path: Path) -> dict[str, Any]:
    suffix = path.suffix.lower()
    text = path.read_text()
    if suffix == ".toml":
        return tomllib.loads(text)
    if suffix == ".json":
        return json.loads(text)
    raise SpecFileError(f"Unsupported declaration format {suffix!r} (use .toml or .json)")


def load_vhost_spec(path: Path) -> VhostSpec:
    """Read a single vhost declaration.

    A TOML file holds the vhost fields at top level, with additional
    locations as ``[[locations]]`` tables.
    """
    if not path.is_file():
        raise SpecFileError(f"Declaration file not found: {path}")
    try:
        data = _parse(path)
    except (tomllib.TOMLDecodeError, json.JSONDecodeError) as exc:
        raise SpecFileError(f"Could not parse {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise SpecFileError(f"{path}: expected a table/object at top level")
    try:
        return VhostSpec.model_validate(data)
    except ValidationError as exc:
        raise SpecFileError(f"Invalid vhost declaration in {path}:\n{exc}") from exc
