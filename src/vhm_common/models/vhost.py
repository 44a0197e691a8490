"""Virtual host model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from vhm_common.constants import (
    DEFAULT_FASTCGI_PARAMS,
    DEFAULT_INDEX_FILES,
    DEFAULT_PROXY_READ_TIMEOUT,
    DEFAULT_PROXY_SET_HEADER,
    DEFAULT_SSL_CIPHERS,
    DEFAULT_SSL_PROTOCOLS,
    DEFAULT_SSL_SESSION_TIMEOUT,
)
from vhm_common.models.fragment import Ensure
from vhm_common.models.location import LocationSpec


class VhostSpec(BaseModel):
    """Declarative description of one NGINX virtual host.

    ``protocol`` is kept as a plain string so that an unsupported value
    reaches the renderer, which reports it as a configuration error.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    ensure: Ensure = Ensure.PRESENT
    listen_ip: str = "*"
    listen_port: int = 80
    listen_options: str | None = None
    ipv6_enable: bool = False
    ipv6_listen_ip: str = "::"
    ipv6_listen_port: int = 80
    ipv6_listen_options: str = "default ipv6only=on"
    ssl: bool = False
    ssl_cert: str | None = None
    ssl_key: str | None = None
    ssl_port: int = 443
    ssl_protocols: str = DEFAULT_SSL_PROTOCOLS
    ssl_ciphers: str = DEFAULT_SSL_CIPHERS
    ssl_session_timeout: str = DEFAULT_SSL_SESSION_TIMEOUT
    protocol: str | None = None
    server_name: list[str] | None = None
    rewrite_www_to_non_www: bool = False
    proxy: str | None = None
    proxy_read_timeout: str = DEFAULT_PROXY_READ_TIMEOUT
    proxy_set_header: list[str] = Field(default_factory=lambda: list(DEFAULT_PROXY_SET_HEADER))
    fastcgi: str | None = None
    fastcgi_params: str = DEFAULT_FASTCGI_PARAMS
    fastcgi_script: str | None = None
    www_root: str | None = None
    index_files: list[str] = Field(default_factory=lambda: list(DEFAULT_INDEX_FILES))
    try_files: list[str] | None = None
    auth_basic: str | None = None
    auth_basic_user_file: str | None = None
    location_cfg_prepend: dict[str, str] | None = None
    location_cfg_append: dict[str, str] | None = None
    locations: list[LocationSpec] = Field(default_factory=list)

    @property
    def server_names(self) -> list[str]:
        return list(self.server_name) if self.server_name else [self.name]

    @property
    def conf_filename(self) -> str:
        return f"{self.name}.conf"
