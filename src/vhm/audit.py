"""JSONL audit trail for state-changing operations."""

from __future__ import annotations

import getpass
import logging
import os
import socket
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator

from vhm_common import AuditEvent

from vhm.config import get_config

log = logging.getLogger(__name__)


def _get_actor() -> str:
    return os.environ.get("VHM_ACTOR") or getpass.getuser()


def _write_jsonl(path: Path, event: AuditEvent) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a") as f:
        f.write(event.to_jsonl() + "\n")


def log_event(event: AuditEvent) -> None:
    """Append an audit event to the JSONL log.

    An unwritable audit log must not mask the outcome of the audited
    operation, so write failures are logged instead of raised.
    """
    cfg = get_config()
    try:
        _write_jsonl(cfg.audit_jsonl_path, event)
    except OSError as exc:
        log.warning("Could not write audit log %s: %s", cfg.audit_jsonl_path, exc)


@contextmanager
def audit(action: str, target: str = "", **params: Any) -> Generator[AuditEvent, None, None]:
    """Context manager that records timing and success/failure."""
    event = AuditEvent(
        host=socket.gethostname(),
        actor=_get_actor(),
        action=action,
        target=target,
        params=params,
    )
    start = time.monotonic()
    try:
        yield event
        event.result = "success"
    except Exception as exc:
        event.result = "failure"
        event.error = str(exc)
        raise
    finally:
        event.duration_ms = int((time.monotonic() - start) * 1000)
        log_event(event)
