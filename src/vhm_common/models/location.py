"""Location block model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from vhm_common.constants import (
    DEFAULT_FASTCGI_PARAMS,
    DEFAULT_INDEX_FILES,
    DEFAULT_PROXY_READ_TIMEOUT,
    DEFAULT_PROXY_SET_HEADER,
    LOCATION_PRIORITY,
)
from vhm_common.models.fragment import Ensure


class LocationSpec(BaseModel):
    """A ``location`` block inside a vhost.

    Nested locations declared on a ``VhostSpec`` leave ``vhost``, ``ssl`` and
    ``priority`` unset; the vhost renderer fills them in. ``ssl_only`` keeps a
    location out of the plain server and is forced on when there is no plain
    server.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    location: str = "/"
    vhost: str = ""
    ensure: Ensure = Ensure.PRESENT
    ssl: bool = False
    ssl_only: bool = False
    priority: int = LOCATION_PRIORITY
    proxy: str | None = None
    proxy_read_timeout: str = DEFAULT_PROXY_READ_TIMEOUT
    proxy_set_header: list[str] = Field(default_factory=lambda: list(DEFAULT_PROXY_SET_HEADER))
    fastcgi: str | None = None
    fastcgi_params: str = DEFAULT_FASTCGI_PARAMS
    fastcgi_script: str | None = None
    www_root: str | None = None
    location_alias: str | None = None
    stub_status: bool = False
    index_files: list[str] = Field(default_factory=lambda: list(DEFAULT_INDEX_FILES))
    try_files: list[str] | None = None
    location_custom_cfg: dict[str, str] | None = None
    location_cfg_prepend: dict[str, str] | None = None
    location_cfg_append: dict[str, str] | None = None
