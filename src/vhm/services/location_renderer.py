"""Render ``location`` blocks into vhost fragments."""

from __future__ import annotations

from pathlib import Path

from vhm_common import FRAGMENT_GROUP, FRAGMENT_MODE, FRAGMENT_OWNER, Fragment, FragmentRole, LocationSpec
from vhm_common.constants import FOOTER_PRIORITY, LOCATION_PRIORITY, SSL_LOCATION_OFFSET

from vhm.errors import LocationConfigError
from vhm.services import naming, templating

# First match wins.
_CONTENT_KINDS = (
    ("location_custom_cfg", "custom"),
    ("stub_status", "stub_status"),
    ("location_alias", "alias"),
    ("fastcgi", "fastcgi"),
    ("proxy", "proxy"),
    ("www_root", "directory"),
)


def content_kind(loc: LocationSpec) -> str | None:
    """Return the template used for the location body, or None if it has no content."""
    for attr, kind in _CONTENT_KINDS:
        if getattr(loc, attr):
            return kind
    return None


def validate_location(loc: LocationSpec) -> None:
    """Raise LocationConfigError if the location cannot be rendered."""
    if not naming.is_valid_name(loc.name):
        raise LocationConfigError(f"Invalid location name {loc.name!r}")
    if not loc.vhost:
        raise LocationConfigError(f"Location {loc.name!r} is not attached to a vhost")
    if content_kind(loc) is None:
        raise LocationConfigError(
            f"Cannot create location {loc.name!r} without one of www_root, proxy, fastcgi, "
            "location_alias, stub_status or location_custom_cfg"
        )
    if loc.ssl_only and not loc.ssl:
        raise LocationConfigError(f"Location {loc.name!r} is ssl_only but ssl is not enabled")
    if not LOCATION_PRIORITY <= loc.priority < FOOTER_PRIORITY:
        raise LocationConfigError(
            f"Location {loc.name!r} priority {loc.priority} is outside "
            f"{LOCATION_PRIORITY}..{FOOTER_PRIORITY - 1}"
        )


def fragment_name(loc: LocationSpec, *, ssl: bool = False) -> str:
    if ssl:
        return f"{loc.vhost}-{loc.priority + SSL_LOCATION_OFFSET:03d}-{loc.name}-ssl"
    return f"{loc.vhost}-{loc.priority:03d}-{loc.name}"


def render_location_body(loc: LocationSpec) -> str:
    """Render the ``location ... { }`` block text."""
    validate_location(loc)
    return templating.render("location/location.conf.j2", loc=loc, kind=content_kind(loc))


def render_location(
    loc: LocationSpec,
    *,
    staging_dir: Path,
    role: FragmentRole = FragmentRole.LOCATION,
    owner: str = FRAGMENT_OWNER,
    group: str = FRAGMENT_GROUP,
    mode: int = FRAGMENT_MODE,
) -> list[Fragment]:
    """Render a location into its plain and/or SSL fragments (plain first)."""
    content = render_location_body(loc)
    names = []
    if not loc.ssl_only:
        names.append(fragment_name(loc))
    if loc.ssl:
        names.append(fragment_name(loc, ssl=True))
    return [
        Fragment(
            path=staging_dir / name,
            content=content,
            ensure=loc.ensure,
            role=role,
            owner=owner,
            group=group,
            mode=mode,
        )
        for name in names
    ]
