"""Tests for bcrypt htpasswd service."""

from __future__ import annotations

from pathlib import Path

import bcrypt
import pytest

from vhm.errors import AuthError
from vhm.services.htpasswd import (
    check_password,
    hash_password,
    htpasswd_path,
    list_users,
    remove_user,
    set_user,
)


class TestHtpasswd:
    def test_hash_password_is_bcrypt(self):
        hashed = hash_password("secret123")
        assert hashed.startswith("$2b$")
        assert bcrypt.checkpw(b"secret123", hashed.encode())

    def test_set_and_check(self, tmp_path: Path):
        path = tmp_path / "auth" / "example.com.htpasswd"
        assert set_user(path, "admin", "password") is True
        assert list_users(path) == ["admin"]
        assert check_password(path, "admin", "password")
        assert not check_password(path, "admin", "wrong")
        assert path.stat().st_mode & 0o777 == 0o640

    def test_update_keeps_other_users(self, tmp_path: Path):
        path = tmp_path / "example.com.htpasswd"
        set_user(path, "alice", "one")
        set_user(path, "bob", "two")
        assert set_user(path, "alice", "three") is False
        assert list_users(path) == ["alice", "bob"]
        assert check_password(path, "alice", "three")
        assert check_password(path, "bob", "two")

    def test_remove(self, tmp_path: Path):
        path = tmp_path / "example.com.htpasswd"
        set_user(path, "alice", "one")
        assert remove_user(path, "alice") is True
        assert remove_user(path, "alice") is False
        assert list_users(path) == []

    def test_read_nonexistent(self, tmp_path: Path):
        assert list_users(tmp_path / "nonexistent.htpasswd") == []
        assert not check_password(tmp_path / "nonexistent.htpasswd", "a", "b")

    def test_rejects_colon_in_username(self, tmp_path: Path):
        with pytest.raises(AuthError, match="htpasswd username"):
            set_user(tmp_path / "x.htpasswd", "a:b", "pw")

    def test_path_for_vhost(self, tmp_path: Path):
        assert htpasswd_path(tmp_path, "example.com") == tmp_path / "example.com.htpasswd"

    @pytest.mark.parametrize("vhost", ["../x", "a/b", "", ".hidden"])
    def test_path_rejects_unsafe_vhost(self, tmp_path: Path, vhost: str):
        with pytest.raises(AuthError, match="Invalid vhost name"):
            htpasswd_path(tmp_path, vhost)
