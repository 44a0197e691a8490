"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from vhm_common import VhmConfig, VhostSpec


@pytest.fixture
def tmp_config(tmp_path: Path) -> VhmConfig:
    """Return a VhmConfig pointing at temp directories."""
    (tmp_path / "nginx" / "sites-available").mkdir(parents=True)
    (tmp_path / "nginx" / "sites-enabled").mkdir(parents=True)
    return VhmConfig(
        staging_dir=tmp_path / "staging",
        nginx_dir=tmp_path / "nginx",
        nginx_log_dir=tmp_path / "log" / "nginx",
        nginx_bin="nginx",
        compose_file=None,
        audit_jsonl_path=tmp_path / "log" / "audit.jsonl",
    )


@pytest.fixture
def plain_spec() -> VhostSpec:
    return VhostSpec(name="example.com", proxy="http://127.0.0.1:8080")


@pytest.fixture
def both_spec() -> VhostSpec:
    return VhostSpec(
        name="shop.example.com",
        ssl=True,
        ssl_cert="/etc/ssl/shop.pem",
        ssl_key="/etc/ssl/shop.key",
        protocol="both",
        www_root="/srv/shop",
    )
