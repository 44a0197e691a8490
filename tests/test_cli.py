"""Tests for the vhost CLI commands."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from vhm_common import VhmConfig
from vhm.cli import app, main
from vhm.errors import AuthError, VhostConfigError, VhostNotFoundError

runner = CliRunner()


@pytest.fixture
def cli_config(tmp_config: VhmConfig):
    with patch("vhm.commands.vhost.get_config", return_value=tmp_config), patch(
        "vhm.audit.get_config", return_value=tmp_config
    ), patch("vhm.commands.auth.get_config", return_value=tmp_config):
        yield tmp_config


@pytest.fixture
def spec_file(tmp_path: Path) -> Path:
    path = tmp_path / "example.json"
    path.write_text(json.dumps({"name": "example.com", "proxy": "http://127.0.0.1:8080"}))
    return path


class TestRender:
    def test_prints_fragments(self, cli_config: VhmConfig, spec_file: Path):
        result = runner.invoke(app, ["vhost", "render", str(spec_file)])
        assert result.exit_code == 0, result.output
        assert "example.com-001" in result.output
        assert "example.com-699" in result.output
        assert not cli_config.fragment_dir.exists()

    def test_invalid_spec(self, cli_config: VhmConfig, tmp_path: Path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"name": "x", "proxy": "http://a", "protocol": "tls"}))
        result = runner.invoke(app, ["vhost", "render", str(path)])
        assert result.exit_code != 0
        assert isinstance(result.exception, VhostConfigError)


class TestApply:
    def test_apply_reloads_on_change(self, cli_config: VhmConfig, spec_file: Path):
        with patch("vhm.commands.vhost.nginx.reload") as reload:
            result = runner.invoke(app, ["vhost", "apply", str(spec_file)])
        assert result.exit_code == 0, result.output
        reload.assert_called_once_with(cli_config)
        assert (cli_config.sites_available_dir / "example.com.conf").exists()

        audit_line = json.loads(cli_config.audit_jsonl_path.read_text().strip().splitlines()[-1])
        assert audit_line["action"] == "vhost.apply"
        assert audit_line["target"] == "example.com"

    def test_second_apply_skips_reload(self, cli_config: VhmConfig, spec_file: Path):
        with patch("vhm.commands.vhost.nginx.reload") as reload:
            runner.invoke(app, ["vhost", "apply", str(spec_file)])
            result = runner.invoke(app, ["vhost", "apply", str(spec_file)])
        assert result.exit_code == 0, result.output
        assert reload.call_count == 1
        assert "No changes" in result.output

    def test_no_reload(self, cli_config: VhmConfig, spec_file: Path):
        with patch("vhm.commands.vhost.nginx.reload") as reload:
            result = runner.invoke(app, ["vhost", "apply", str(spec_file), "--no-reload"])
        assert result.exit_code == 0, result.output
        reload.assert_not_called()

    def test_dry_run(self, cli_config: VhmConfig, spec_file: Path):
        with patch("vhm.commands.vhost.nginx.reload") as reload:
            result = runner.invoke(app, ["vhost", "apply", str(spec_file), "--dry-run"])
        assert result.exit_code == 0, result.output
        assert "would write" in result.output
        reload.assert_not_called()
        assert not cli_config.fragment_dir.exists()


class TestInspect:
    def test_list_and_show(self, cli_config: VhmConfig, spec_file: Path):
        with patch("vhm.commands.vhost.nginx.reload"):
            runner.invoke(app, ["vhost", "apply", str(spec_file)])

        result = runner.invoke(app, ["vhost", "list"])
        assert result.exit_code == 0, result.output
        assert "example.com" in result.output

        result = runner.invoke(app, ["vhost", "show", "example.com"])
        assert result.exit_code == 0, result.output
        assert "proxy_pass" in result.output

    def test_list_counts_only_own_fragments(self, cli_config: VhmConfig, tmp_path: Path):
        for name in ("app", "app-100"):
            path = tmp_path / f"{name}.json"
            path.write_text(json.dumps({"name": name, "proxy": "http://127.0.0.1:8080"}))
            with patch("vhm.commands.vhost.nginx.reload"):
                runner.invoke(app, ["vhost", "apply", str(path)])

        result = runner.invoke(app, ["vhost", "list"])
        assert result.exit_code == 0, result.output
        rows = [line.split() for line in result.output.splitlines() if line.startswith("│ app")]
        assert [(row[1], row[5]) for row in rows] == [("app", "3"), ("app-100", "3")]

    def test_show_missing(self, cli_config: VhmConfig):
        result = runner.invoke(app, ["vhost", "show", "missing.example.com"])
        assert isinstance(result.exception, VhostNotFoundError)

    def test_remove(self, cli_config: VhmConfig, spec_file: Path):
        with patch("vhm.commands.vhost.nginx.reload") as reload:
            runner.invoke(app, ["vhost", "apply", str(spec_file)])
            result = runner.invoke(app, ["vhost", "remove", "example.com", "--yes"])
        assert result.exit_code == 0, result.output
        assert reload.call_count == 2
        assert not (cli_config.sites_available_dir / "example.com.conf").exists()


class TestAuth:
    def test_set_and_list(self, cli_config: VhmConfig):
        result = runner.invoke(app, ["auth", "set", "example.com", "admin", "--password", "s3cret"])
        assert result.exit_code == 0, result.output
        result = runner.invoke(app, ["auth", "list", "example.com"])
        assert "admin" in result.output

    def test_colon_in_username_is_a_cli_error(self, cli_config: VhmConfig):
        result = runner.invoke(app, ["auth", "set", "example.com", "a:b", "--password", "x"])
        assert isinstance(result.exception, AuthError)

    def test_vhost_name_cannot_escape_auth_dir(self, cli_config: VhmConfig):
        result = runner.invoke(app, ["auth", "set", "../x", "admin", "--password", "x"])
        assert isinstance(result.exception, AuthError)
        assert not (cli_config.nginx_dir / "x.htpasswd").exists()

    def test_main_reports_auth_error(self, cli_config: VhmConfig, monkeypatch, capsys):
        monkeypatch.setattr("sys.argv", ["vhm", "auth", "set", "example.com", "a:b", "--password", "x"])
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 1
        assert "Invalid htpasswd username" in capsys.readouterr().err
