"""Check ID context for tracing a single duplicate check.

A duplicate check scores one query against many candidates. Every log entry
emitted while those candidates are scored carries the same check ID, so a
moderator's "why was this flagged" question can be answered from the logs.

Usage:
    from artdedup.observability.context import check_id_context

    with check_id_context() as check_id:
        service.check_for_duplicates(query, candidates)
"""

import uuid
from contextvars import ContextVar
from contextlib import contextmanager
from typing import Optional, Generator

_check_id_var: ContextVar[Optional[str]] = ContextVar("check_id", default=None)


def set_check_id(check_id: Optional[str] = None) -> str:
    """Set the check ID for the current context.

    Args:
        check_id: Optional explicit ID. If None, generates a UUID4.

    Returns:
        The check ID that was set.
    """
    if check_id is None:
        check_id = str(uuid.uuid4())

    _check_id_var.set(check_id)
    return check_id


def get_check_id() -> Optional[str]:
    """Current check ID, or None when no check is in progress."""
    return _check_id_var.get()


def clear_check_id() -> None:
    _check_id_var.set(None)


@contextmanager
def check_id_context(check_id: Optional[str] = None) -> Generator[str, None, None]:
    """Scope a check ID to a block, restoring the previous one on exit.

    Args:
        check_id: Optional explicit ID. If None, generates a UUID4.

    Yields:
        The check ID in effect inside the block.
    """
    if check_id is None:
        check_id = str(uuid.uuid4())

    token = _check_id_var.set(check_id)
    try:
        yield check_id
    finally:
        _check_id_var.reset(token)


def get_or_create_check_id() -> str:
    """Return the current check ID, creating one if none is set."""
    current = get_check_id()
    if current is not None:
        return current
    return set_check_id()
