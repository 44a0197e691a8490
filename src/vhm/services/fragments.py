"""Materialise rendered fragments and assemble them into vhost config files.

Each applied vhost records the fragment names it owns in
``<fragment_dir>/.manifests/<name>.json``. Stale cleanup and removal work
from that manifest, since a name prefix cannot tell vhost ``app`` apart
from vhost ``app-100``.
"""

from __future__ import annotations

import grp
import json
import logging
import os
import pwd
import shutil
from pathlib import Path

from pydantic import BaseModel

from vhm_common import Ensure, Fragment

from vhm.services.vhost_renderer import VhostPlan

log = logging.getLogger(__name__)

_MANIFEST_SUBDIR = ".manifests"


class ApplyResult(BaseModel):
    """What changed on disk while applying a plan."""

    name: str
    written: list[Path] = []
    removed: list[Path] = []
    target: Path | None = None
    target_changed: bool = False
    dry_run: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.written or self.removed or self.target_changed)


def _manifest_path(fragment_dir: Path, name: str) -> Path:
    return fragment_dir / _MANIFEST_SUBDIR / f"{name}.json"


def read_manifest(fragment_dir: Path, name: str) -> list[str]:
    """Fragment file names last applied for a vhost."""
    path = _manifest_path(fragment_dir, name)
    if not path.is_file():
        return []
    return json.loads(path.read_text())


def _write_manifest(fragment_dir: Path, name: str, fragment_names: list[str]) -> None:
    path = _manifest_path(fragment_dir, name)
    if not fragment_names:
        path.unlink(missing_ok=True)
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(sorted(fragment_names)))


def _owner_of(path: Path) -> tuple[str, str]:
    st = path.stat()
    try:
        owner = pwd.getpwuid(st.st_uid).pw_name
    except KeyError:
        owner = str(st.st_uid)
    try:
        group = grp.getgrgid(st.st_gid).gr_name
    except KeyError:
        group = str(st.st_gid)
    return owner, group


def _manages_ownership() -> bool:
    # chown needs root; unprivileged runs keep the invoking user's ownership.
    return os.geteuid() == 0


def _needs_write(path: Path, content: str, mode: int, owner: str, group: str) -> bool:
    if not path.is_file():
        return True
    if path.read_text() != content:
        return True
    if (path.stat().st_mode & 0o777) != mode:
        return True
    return _manages_ownership() and _owner_of(path) != (owner, group)


def _write_file(path: Path, content: str, *, owner: str, group: str, mode: int) -> bool:
    if not _needs_write(path, content, mode, owner, group):
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    path.chmod(mode)
    if _manages_ownership():
        shutil.chown(path, user=owner, group=group)
    return True


def _remove_file(path: Path) -> bool:
    if path.is_symlink() or path.exists():
        path.unlink()
        return True
    return False


def write_fragment(fragment: Fragment) -> bool:
    """Bring one fragment file to its desired state. Returns True if it changed."""
    if not fragment.present:
        return _remove_file(fragment.path)
    return _write_file(
        fragment.path,
        fragment.content,
        owner=fragment.owner,
        group=fragment.group,
        mode=fragment.mode,
    )


def stale_fragments(plan: VhostPlan, fragment_dir: Path) -> list[Path]:
    """Staged fragments of this vhost that the plan no longer declares."""
    declared = {f.path.name for f in plan.fragments}
    return sorted(
        fragment_dir / name
        for name in read_manifest(fragment_dir, plan.name)
        if name not in declared and (fragment_dir / name).exists()
    )


def assemble_content(plan: VhostPlan) -> str:
    """Concatenate the present fragments in order."""
    return "".join(f.content for f in plan.fragments if f.present)


def assemble(plan: VhostPlan, sites_dir: Path) -> bool:
    """Write (or remove) ``sites_dir/<name>.conf`` from the staged fragments."""
    target = sites_dir / plan.target
    if plan.ensure is Ensure.ABSENT:
        return _remove_file(target)
    head = plan.fragments[0]
    return _write_file(
        target,
        "".join(f.path.read_text() for f in plan.fragments if f.present),
        owner=head.owner,
        group=head.group,
        mode=head.mode,
    )


def enable_site(plan: VhostPlan, sites_dir: Path, enabled_dir: Path) -> bool:
    """Point ``enabled_dir/<name>.conf`` at the assembled file (or drop the link)."""
    link = enabled_dir / plan.target
    if plan.ensure is Ensure.ABSENT:
        return _remove_file(link)
    target = sites_dir / plan.target
    if link.is_symlink() and Path(os.readlink(link)) == target:
        return False
    _remove_file(link)
    enabled_dir.mkdir(parents=True, exist_ok=True)
    link.symlink_to(target)
    return True


def plan_changes(plan: VhostPlan, fragment_dir: Path, sites_dir: Path) -> ApplyResult:
    """Report what ``apply_plan`` would change, without touching the disk."""
    written = []
    removed = stale_fragments(plan, fragment_dir)
    for fragment in plan.fragments:
        if fragment.present:
            if _needs_write(fragment.path, fragment.content, fragment.mode, fragment.owner, fragment.group):
                written.append(fragment.path)
        elif fragment.path.exists():
            removed.append(fragment.path)
    target = sites_dir / plan.target
    if plan.ensure is Ensure.ABSENT:
        target_changed = target.exists()
    else:
        head = plan.fragments[0]
        target_changed = _needs_write(target, assemble_content(plan), head.mode, head.owner, head.group)
    return ApplyResult(
        name=plan.name,
        written=written,
        removed=sorted(removed),
        target=target,
        target_changed=target_changed,
        dry_run=True,
    )


def apply_plan(
    plan: VhostPlan,
    *,
    fragment_dir: Path,
    sites_dir: Path,
    enabled_dir: Path | None = None,
) -> ApplyResult:
    """Write fragments in order, drop stale ones, then assemble the vhost file.

    The caller decides whether to reload NGINX based on ``ApplyResult.changed``.
    """
    result = ApplyResult(name=plan.name, target=sites_dir / plan.target)

    for fragment in plan.fragments:
        if write_fragment(fragment):
            if fragment.present:
                result.written.append(fragment.path)
            else:
                result.removed.append(fragment.path)
            log.debug("Fragment %s -> %s", fragment.path, fragment.ensure.value)

    for path in stale_fragments(plan, fragment_dir):
        path.unlink()
        result.removed.append(path)
        log.debug("Removed stale fragment %s", path)

    _write_manifest(fragment_dir, plan.name, [f.path.name for f in plan.fragments if f.present])

    result.target_changed = assemble(plan, sites_dir)
    if enabled_dir is not None:
        result.target_changed = enable_site(plan, sites_dir, enabled_dir) or result.target_changed

    log.info(
        "Applied vhost %s: %d written, %d removed, config %s",
        plan.name,
        len(result.written),
        len(result.removed),
        "changed" if result.target_changed else "unchanged",
    )
    return result


def remove_vhost(
    name: str,
    *,
    fragment_dir: Path,
    sites_dir: Path,
    enabled_dir: Path | None = None,
) -> ApplyResult:
    """Remove every staged fragment and the assembled config for a vhost."""
    result = ApplyResult(name=name, target=sites_dir / f"{name}.conf")
    for fragment_name in read_manifest(fragment_dir, name):
        if _remove_file(fragment_dir / fragment_name):
            result.removed.append(fragment_dir / fragment_name)
    _write_manifest(fragment_dir, name, [])
    result.target_changed = _remove_file(sites_dir / f"{name}.conf")
    if enabled_dir is not None:
        result.target_changed = _remove_file(enabled_dir / f"{name}.conf") or result.target_changed
    return result
