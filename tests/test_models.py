"""Tests for shared Pydantic models."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

import pytest
from pydantic import ValidationError

from vhm_common import AuditEvent, Ensure, Fragment, FragmentRole, LocationSpec, Protocol, VhostSpec


class TestVhostSpec:
    def test_defaults(self):
        spec = VhostSpec(name="example.com")
        assert spec.ensure is Ensure.PRESENT
        assert spec.listen_ip == "*"
        assert spec.listen_port == 80
        assert spec.ssl is False
        assert spec.ssl_port == 443
        assert spec.protocol is None
        assert spec.index_files == ["index.html", "index.htm", "index.php"]
        assert spec.locations == []
        assert spec.server_names == ["example.com"]
        assert spec.conf_filename == "example.com.conf"

    def test_explicit_server_names(self):
        spec = VhostSpec(name="site", server_name=["a.example.com", "b.example.com"])
        assert spec.server_names == ["a.example.com", "b.example.com"]

    def test_frozen(self):
        spec = VhostSpec(name="example.com")
        with pytest.raises(ValidationError):
            spec.ssl = True

    def test_coerces_types(self):
        spec = VhostSpec.model_validate({"name": "x", "listen_port": "8080", "ensure": "absent"})
        assert spec.listen_port == 8080
        assert spec.ensure is Ensure.ABSENT

    def test_unknown_protocol_is_accepted_until_render(self):
        spec = VhostSpec(name="x", protocol="spdy")
        assert spec.protocol == "spdy"

    def test_nested_locations(self):
        spec = VhostSpec.model_validate(
            {"name": "x", "locations": [{"name": "static", "location": "/static/", "www_root": "/srv"}]}
        )
        assert isinstance(spec.locations[0], LocationSpec)
        assert spec.locations[0].vhost == ""


class TestProtocol:
    def test_flags(self):
        assert Protocol.PLAIN.has_plain and not Protocol.PLAIN.has_ssl
        assert Protocol.SSL.has_ssl and not Protocol.SSL.has_plain
        assert Protocol.BOTH.has_plain and Protocol.BOTH.has_ssl


class TestFragment:
    def test_shared_metadata_defaults(self):
        fragment = Fragment(path=Path("/tmp/nginx.d/x-001"), content="server {\n", role=FragmentRole.HEADER)
        assert fragment.owner == "root"
        assert fragment.group == "root"
        assert fragment.mode == 0o644
        assert fragment.present


class TestAuditEvent:
    def test_defaults(self):
        event = AuditEvent(action="vhost.apply", target="example.com")
        assert event.result == "success"
        assert event.error is None
        assert isinstance(event.timestamp, datetime)

    def test_to_jsonl(self):
        event = AuditEvent(action="vhost.apply", target="example.com", params={"protocol": "both"})
        data = json.loads(event.to_jsonl())
        assert data["action"] == "vhost.apply"
        assert data["params"]["protocol"] == "both"
