"""Shared Pydantic models."""

from vhm_common.models.audit_event import AuditEvent
from vhm_common.models.fragment import Ensure, Fragment, FragmentRole, Protocol
from vhm_common.models.location import LocationSpec
from vhm_common.models.vhost import VhostSpec

__all__ = [
    "AuditEvent",
    "Ensure",
    "Fragment",
    "FragmentRole",
    "LocationSpec",
    "Protocol",
    "VhostSpec",
]
