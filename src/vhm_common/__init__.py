"""VHM Common: shared models, constants and configuration."""

from vhm_common.config import VhmConfig
from vhm_common.constants import (
    AUDIT_JSONL_PATH,
    DEFAULT_INDEX_FILES,
    DEFAULT_PROXY_READ_TIMEOUT,
    FRAGMENT_GROUP,
    FRAGMENT_MODE,
    FRAGMENT_OWNER,
    LOG_DIR,
    NGINX_DIR,
    NGINX_SERVICE,
    STAGING_DIR,
)
from vhm_common.models.audit_event import AuditEvent
from vhm_common.models.fragment import Ensure, Fragment, FragmentRole, Protocol
from vhm_common.models.location import LocationSpec
from vhm_common.models.vhost import VhostSpec

__all__ = [
    "AUDIT_JSONL_PATH",
    "AuditEvent",
    "DEFAULT_INDEX_FILES",
    "DEFAULT_PROXY_READ_TIMEOUT",
    "Ensure",
    "FRAGMENT_GROUP",
    "FRAGMENT_MODE",
    "FRAGMENT_OWNER",
    "Fragment",
    "FragmentRole",
    "LOG_DIR",
    "LocationSpec",
    "NGINX_DIR",
    "NGINX_SERVICE",
    "Protocol",
    "STAGING_DIR",
    "VhmConfig",
    "VhostSpec",
]
