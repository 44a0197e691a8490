"""Central configuration for VHM tools."""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field

from vhm_common.constants import (
    AUDIT_JSONL_PATH,
    AUTH_SUBDIR,
    FRAGMENT_GROUP,
    FRAGMENT_MODE,
    FRAGMENT_OWNER,
    FRAGMENT_SUBDIR,
    NGINX_DIR,
    NGINX_LOG_DIR,
    SITES_AVAILABLE_SUBDIR,
    SITES_ENABLED_SUBDIR,
    STAGING_DIR,
)


def _env_path(name: str, default: Path) -> Path:
    env = os.environ.get(name)
    return Path(env) if env else default


def _default_compose_file() -> Path | None:
    env = os.environ.get("VHM_COMPOSE_FILE")
    return Path(env) if env else None


class VhmConfig(BaseModel):
    """Runtime configuration resolved once at startup."""

    staging_dir: Path = Field(default_factory=lambda: _env_path("VHM_STAGING_DIR", STAGING_DIR))
    nginx_dir: Path = Field(default_factory=lambda: _env_path("VHM_NGINX_DIR", NGINX_DIR))
    nginx_log_dir: Path = Field(default_factory=lambda: _env_path("VHM_NGINX_LOG_DIR", NGINX_LOG_DIR))
    nginx_bin: str = Field(default_factory=lambda: os.environ.get("VHM_NGINX_BIN", "nginx"))
    compose_file: Path | None = Field(default_factory=_default_compose_file)
    audit_jsonl_path: Path = Field(default_factory=lambda: _env_path("VHM_AUDIT_LOG", AUDIT_JSONL_PATH))
    fragment_owner: str = FRAGMENT_OWNER
    fragment_group: str = FRAGMENT_GROUP
    fragment_mode: int = FRAGMENT_MODE

    @property
    def fragment_dir(self) -> Path:
        return self.staging_dir / FRAGMENT_SUBDIR

    @property
    def sites_available_dir(self) -> Path:
        return self.nginx_dir / SITES_AVAILABLE_SUBDIR

    @property
    def sites_enabled_dir(self) -> Path:
        return self.nginx_dir / SITES_ENABLED_SUBDIR

    @property
    def auth_dir(self) -> Path:
        return self.nginx_dir / AUTH_SUBDIR
