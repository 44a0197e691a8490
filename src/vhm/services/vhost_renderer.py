"""Jinja2-based NGINX vhost fragment renderer.

A vhost is rendered into numbered fragments that sort into the order in
which they are concatenated into the final config file::

    <name>-001                 plain server header
    <name>-500-<name>-default  default location
    <name>-5NN-<location>      additional locations
    <name>-699                 plain server footer
    <name>-700-ssl             SSL server header
    <name>-8NN-...-ssl         locations inside the SSL server
    <name>-999-ssl             SSL server footer

Nothing here touches the filesystem; see ``vhm.services.fragments``.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel

from vhm_common import (
    NGINX_SERVICE,
    Ensure,
    Fragment,
    FragmentRole,
    LocationSpec,
    Protocol,
    VhmConfig,
    VhostSpec,
)
from vhm_common.constants import (
    FOOTER_PRIORITY,
    HEADER_PRIORITY,
    LOCATION_PRIORITY,
    MAX_EXTRA_LOCATIONS,
    SSL_FOOTER_PRIORITY,
    SSL_HEADER_PRIORITY,
)

from vhm.config import get_config
from vhm.errors import VhostConfigError
from vhm.services import location_renderer, naming, network, templating

log = logging.getLogger(__name__)

_VALID_PROTOCOLS = ", ".join(p.value for p in Protocol)


class VhostPlan(BaseModel):
    """Everything needed to materialise one vhost, in write order."""

    name: str
    ensure: Ensure
    protocol: Protocol
    target: str
    fragments: list[Fragment]
    default_location: LocationSpec
    locations: list[LocationSpec]
    warnings: list[str] = []
    notify: str = NGINX_SERVICE

    def roles(self) -> list[FragmentRole]:
        """Fragment roles in order of first appearance."""
        seen: list[FragmentRole] = []
        for fragment in self.fragments:
            if fragment.role not in seen:
                seen.append(fragment.role)
        return seen


def resolve_protocol(spec: VhostSpec) -> Protocol:
    """Return the protocol mode, deriving it from the SSL settings when unset."""
    if spec.protocol is not None:
        try:
            return Protocol(spec.protocol)
        except ValueError:
            raise VhostConfigError(
                f"{spec.name}: protocol must be one of {_VALID_PROTOCOLS}, got {spec.protocol!r}"
            ) from None
    if not spec.ssl:
        return Protocol.PLAIN
    if spec.listen_port == spec.ssl_port:
        return Protocol.SSL
    return Protocol.BOTH


def validate_vhost(spec: VhostSpec, *, ipv6_available: bool | None = None) -> list[str]:
    """Validate a vhost declaration. Returns advisory warnings; raises VhostConfigError."""
    if not naming.is_valid_name(spec.name):
        raise VhostConfigError(f"Invalid vhost name {spec.name!r}")

    protocol = resolve_protocol(spec)

    if spec.ssl and (not spec.ssl_cert or not spec.ssl_key):
        raise VhostConfigError(
            f"{spec.name}: ssl_cert and ssl_key must both be set when ssl is enabled"
        )
    if protocol.has_ssl and not spec.ssl:
        raise VhostConfigError(
            f"{spec.name}: protocol {protocol.value!r} requires ssl to be enabled"
        )
    if protocol is Protocol.BOTH and spec.listen_port == spec.ssl_port:
        raise VhostConfigError(
            f"{spec.name}: listen_port and ssl_port must differ when protocol is 'both'"
        )
    if len(spec.locations) > MAX_EXTRA_LOCATIONS:
        raise VhostConfigError(
            f"{spec.name}: at most {MAX_EXTRA_LOCATIONS} additional locations are supported"
        )
    paths = ["/"]
    names = [f"{spec.name}-default"]
    for loc in spec.locations:
        if loc.location in paths:
            raise VhostConfigError(f"{spec.name}: duplicate location {loc.location!r}")
        if loc.name in names:
            raise VhostConfigError(f"{spec.name}: duplicate location name {loc.name!r}")
        paths.append(loc.location)
        names.append(loc.name)

    warnings: list[str] = []
    if spec.ipv6_enable:
        if ipv6_available is None:
            ipv6_available = network.ipv6_supported()
        if not ipv6_available:
            message = f"{spec.name}: IPv6 is enabled but IPv6 support was not detected on this host"
            log.warning(message)
            warnings.append(message)
    return warnings


def default_location(spec: VhostSpec, protocol: Protocol) -> LocationSpec:
    """Build the ``location /`` declaration delegated to the location renderer."""
    return LocationSpec(
        name=f"{spec.name}-default",
        location="/",
        vhost=spec.name,
        ensure=spec.ensure,
        ssl=protocol.has_ssl,
        ssl_only=not protocol.has_plain,
        priority=LOCATION_PRIORITY,
        proxy=spec.proxy,
        proxy_read_timeout=spec.proxy_read_timeout,
        proxy_set_header=spec.proxy_set_header,
        fastcgi=spec.fastcgi,
        fastcgi_params=spec.fastcgi_params,
        fastcgi_script=spec.fastcgi_script,
        www_root=spec.www_root,
        index_files=spec.index_files,
        try_files=spec.try_files,
        location_cfg_prepend=spec.location_cfg_prepend,
        location_cfg_append=spec.location_cfg_append,
    )


def attach_locations(spec: VhostSpec, protocol: Protocol) -> list[LocationSpec]:
    """Bind the nested location specs to this vhost and number them."""
    attached = []
    for index, loc in enumerate(spec.locations, start=1):
        attached.append(
            loc.model_copy(
                update={
                    "vhost": spec.name,
                    "ssl": protocol.has_ssl,
                    "ssl_only": loc.ssl_only or not protocol.has_plain,
                    "priority": LOCATION_PRIORITY + index,
                    "ensure": Ensure.ABSENT if spec.ensure is Ensure.ABSENT else loc.ensure,
                }
            )
        )
    return attached


def _server_names(spec: VhostSpec) -> tuple[list[str], list[str]]:
    """Return (names served, www names redirected to them)."""
    names = spec.server_names
    if not spec.rewrite_www_to_non_www:
        return names, []
    bare: list[str] = []
    for name in names:
        name = name.removeprefix("www.")
        if name not in bare:
            bare.append(name)
    return bare, [f"www.{name}" for name in bare]


def render_header(spec: VhostSpec, *, ssl: bool, log_dir: str) -> str:
    """Render the opening of the plain or SSL ``server`` block."""
    bare_names, www_names = _server_names(spec)
    return templating.render(
        "vhost/header.conf.j2",
        vhost=spec,
        ssl=ssl,
        port=spec.ssl_port if ssl else spec.listen_port,
        ipv6_port=spec.ssl_port if ssl else spec.ipv6_listen_port,
        scheme="https" if ssl else "http",
        bare_names=bare_names,
        www_names=www_names,
        log_dir=log_dir,
        log_prefix="ssl-" if ssl else "",
    )


def render_footer() -> str:
    return templating.render("vhost/footer.conf.j2")


def render_vhost(
    spec: VhostSpec,
    *,
    cfg: VhmConfig | None = None,
    ipv6_available: bool | None = None,
) -> VhostPlan:
    """Validate a vhost and render its fragments in concatenation order."""
    cfg = cfg or get_config()
    warnings = validate_vhost(spec, ipv6_available=ipv6_available)
    protocol = resolve_protocol(spec)
    staging_dir = cfg.fragment_dir
    log_dir = str(cfg.nginx_log_dir)

    def fragment(suffix: str, content: str, role: FragmentRole) -> Fragment:
        return Fragment(
            path=staging_dir / f"{spec.name}-{suffix}",
            content=content,
            ensure=spec.ensure,
            role=role,
            owner=cfg.fragment_owner,
            group=cfg.fragment_group,
            mode=cfg.fragment_mode,
        )

    fragments: list[Fragment] = []
    if protocol.has_plain:
        fragments.append(
            fragment(f"{HEADER_PRIORITY:03d}", render_header(spec, ssl=False, log_dir=log_dir), FragmentRole.HEADER)
        )
        fragments.append(fragment(f"{FOOTER_PRIORITY:03d}", render_footer(), FragmentRole.FOOTER))
    if protocol.has_ssl:
        fragments.append(
            fragment(
                f"{SSL_HEADER_PRIORITY:03d}-ssl",
                render_header(spec, ssl=True, log_dir=log_dir),
                FragmentRole.SSL_HEADER,
            )
        )
        fragments.append(fragment(f"{SSL_FOOTER_PRIORITY:03d}-ssl", render_footer(), FragmentRole.SSL_FOOTER))

    default = default_location(spec, protocol)
    locations = attach_locations(spec, protocol)
    fragment_kwargs = {
        "staging_dir": staging_dir,
        "owner": cfg.fragment_owner,
        "group": cfg.fragment_group,
        "mode": cfg.fragment_mode,
    }
    fragments.extend(
        location_renderer.render_location(default, role=FragmentRole.DEFAULT_LOCATION, **fragment_kwargs)
    )
    for loc in locations:
        fragments.extend(location_renderer.render_location(loc, **fragment_kwargs))

    # Fragment numbers are zero-padded, so name order is concatenation order.
    fragments.sort(key=lambda f: f.path.name)

    log.debug("Rendered %d fragments for vhost %s (%s)", len(fragments), spec.name, protocol.value)
    return VhostPlan(
        name=spec.name,
        ensure=spec.ensure,
        protocol=protocol,
        target=spec.conf_filename,
        fragments=fragments,
        default_location=default,
        locations=locations,
        warnings=warnings,
    )
