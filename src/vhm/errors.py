"""Custom exceptions for VHM."""

from __future__ import annotations


class VhmError(Exception):
    """Base exception for all VHM operations."""

    def __init__(self, message: str, *, exit_code: int = 1):
        super().__init__(message)
        self.exit_code = exit_code


class VhostConfigError(VhmError):
    """A vhost declaration failed validation."""

    def __init__(self, message: str, *, exit_code: int = 2):
        super().__init__(message, exit_code=exit_code)


class LocationConfigError(VhostConfigError):
    """A location declaration failed validation."""


class SpecFileError(VhmError):
    """A declaration file could not be read or parsed."""


class NginxConfigError(VhmError):
    """NGINX configuration test failed."""


class NginxReloadError(VhmError):
    """NGINX could not be reloaded."""


class VhostNotFoundError(VhmError):
    """Requested vhost file does not exist."""


class AuthError(VhmError):
    """An htpasswd operation was given an invalid vhost or username."""
