"""Correlation id carried through one proxied request.

Log filters and `log_event` read the id from here, so every line written
while a webhook or file request is served can be tied back to it.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from uuid import uuid4

MAX_REQUEST_ID_LENGTH = 128

_current_request_id: ContextVar[str | None] = ContextVar("fileproxy_request_id", default=None)


def get_request_id() -> str | None:
    return _current_request_id.get()


def normalize_request_id(incoming: str | None) -> str:
    """Reuse a caller-supplied id (truncated) or mint a fresh one."""
    candidate = (incoming or "").strip()
    if not candidate:
        return uuid4().hex
    return candidate[:MAX_REQUEST_ID_LENGTH]


@contextmanager
def request_id_scope(request_id: str) -> Iterator[str]:
    """Bind `request_id` for the duration of the block, restoring the outer value after."""
    token = _current_request_id.set(request_id)
    try:
        yield request_id
    finally:
        _current_request_id.reset(token)
