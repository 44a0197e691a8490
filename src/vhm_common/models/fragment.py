"""Fragment model and the small enums shared by vhost and location specs."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from vhm_common.constants import FRAGMENT_GROUP, FRAGMENT_MODE, FRAGMENT_OWNER


class Ensure(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"


class Protocol(str, Enum):
    SSL = "ssl"
    PLAIN = "plain"
    BOTH = "both"

    @property
    def has_plain(self) -> bool:
        return self in (Protocol.PLAIN, Protocol.BOTH)

    @property
    def has_ssl(self) -> bool:
        return self in (Protocol.SSL, Protocol.BOTH)


class FragmentRole(str, Enum):
    HEADER = "header"
    DEFAULT_LOCATION = "default_location"
    LOCATION = "location"
    FOOTER = "footer"
    SSL_HEADER = "ssl_header"
    SSL_FOOTER = "ssl_footer"


class Fragment(BaseModel):
    """A numbered piece of a vhost config file, ready to be written to disk."""

    model_config = ConfigDict(frozen=True)

    path: Path
    content: str
    ensure: Ensure = Ensure.PRESENT
    role: FragmentRole
    owner: str = FRAGMENT_OWNER
    group: str = FRAGMENT_GROUP
    mode: int = FRAGMENT_MODE

    @property
    def present(self) -> bool:
        return self.ensure is Ensure.PRESENT
