"""NGINX config validation and reload."""

from __future__ import annotations

import logging
import subprocess

from vhm_common import VhmConfig

from vhm.config import get_config
from vhm.errors import NginxConfigError, NginxReloadError

log = logging.getLogger(__name__)


def _command(cfg: VhmConfig, *args: str) -> list[str]:
    """Build an nginx invocation, inside the compose service when one is configured."""
    if cfg.compose_file is not None:
        return ["docker", "compose", "-f", str(cfg.compose_file), "exec", "-T", "nginx", "nginx", *args]
    return [cfg.nginx_bin, *args]


def _run(cmd: list[str]) -> subprocess.CompletedProcess[str]:
    log.debug("Running %s", " ".join(cmd))
    try:
        return subprocess.run(cmd, check=False, capture_output=True, text=True)
    except FileNotFoundError as exc:
        raise NginxReloadError(f"Command not found: {cmd[0]}") from exc


def validate_config(cfg: VhmConfig | None = None) -> None:
    """Run ``nginx -t``. Raises NginxConfigError on failure."""
    cfg = cfg or get_config()
    result = _run(_command(cfg, "-t"))
    if result.returncode != 0:
        raise NginxConfigError(f"NGINX config test failed:\n{result.stderr}")


def reload(cfg: VhmConfig | None = None) -> None:
    """Validate config, then reload NGINX."""
    cfg = cfg or get_config()
    validate_config(cfg)
    result = _run(_command(cfg, "-s", "reload"))
    if result.returncode != 0:
        raise NginxReloadError(f"NGINX reload failed:\n{result.stderr}")
    log.info("NGINX reloaded")
