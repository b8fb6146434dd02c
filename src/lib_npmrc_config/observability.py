"""Structured logging for ``.npmrc`` loading and credential lookup.

Purpose
    Give every diagnostic the same shape (an event name plus a ``context``
    mapping carrying the active trace id) while leaving handler and formatter
    choices to the host application. The package logger stays silent until a
    handler is attached.

Contents
    - ``TRACE_ID``: context variable holding the active trace identifier.
    - ``get_logger`` / ``bind_trace_id`` / ``trace_scope``: logger access and
      trace binding (permanent or scoped to one load).
    - ``log_debug`` / ``log_info`` / ``log_warning`` / ``log_error``: level
      helpers funnelling into one private emitter.
    - ``make_event``: payload builder for per-layer events.
    - ``is_secret_key`` / ``redact``: recognise credential keys whose values
      must never reach logs or terminal output.

System Integration
    Used by adapters, the composition root, :class:`NpmrcConfig` lookups and
    the CLI. Events name the key or layer involved, never a credential value.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Final, Iterator, Mapping

TRACE_ID: ContextVar[str | None] = ContextVar("lib_npmrc_config_trace_id", default=None)
"""Current trace identifier attached to every emitted record."""

_LOGGER: Final[logging.Logger] = logging.getLogger("lib_npmrc_config")
_LOGGER.addHandler(logging.NullHandler())

#: Key suffixes whose values are secrets (``//host/:_authToken`` and friends).
SECRET_SUFFIXES: Final[tuple[str, ...]] = (":_authToken", ":_password", ":_auth")
REDACTED: Final[str] = "[REDACTED]"


def get_logger() -> logging.Logger:
    """Return the package logger so applications may attach handlers."""

    return _LOGGER


def bind_trace_id(trace_id: str | None) -> None:
    """Bind *trace_id* for subsequent records; ``None`` clears the binding.

    Examples
    --------
    >>> bind_trace_id('abc123')
    >>> TRACE_ID.get()
    'abc123'
    >>> bind_trace_id(None)
    >>> TRACE_ID.get() is None
    True
    """

    TRACE_ID.set(trace_id)


@contextmanager
def trace_scope(trace_id: str) -> Iterator[str]:
    """Bind *trace_id* for the duration of the ``with`` block.

    The previous binding is restored on exit, so a load nested inside a
    caller's own trace does not overwrite it.

    Examples
    --------
    >>> bind_trace_id('outer')
    >>> with trace_scope('inner'):
    ...     TRACE_ID.get()
    'inner'
    >>> TRACE_ID.get()
    'outer'
    >>> bind_trace_id(None)
    """

    token = TRACE_ID.set(trace_id)
    try:
        yield trace_id
    finally:
        TRACE_ID.reset(token)


def log_debug(message: str, **fields: Any) -> None:
    _emit(logging.DEBUG, message, fields)


def log_info(message: str, **fields: Any) -> None:
    _emit(logging.INFO, message, fields)


def log_warning(message: str, **fields: Any) -> None:
    _emit(logging.WARNING, message, fields)


def log_error(message: str, **fields: Any) -> None:
    _emit(logging.ERROR, message, fields)


def make_event(level: str, path: str | None, payload: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Build the ``layer``/``path`` payload shared by layer lifecycle events.

    >>> make_event('user', None, {'keys': 3})
    {'layer': 'user', 'path': None, 'keys': 3}
    """

    return {"layer": level, "path": path, **(payload or {})}


def is_secret_key(key: str) -> bool:
    """Return ``True`` when *key* stores a token, password or legacy ``_auth`` value.

    >>> is_secret_key('//registry.npmjs.org/:_authToken'), is_secret_key('registry')
    (True, False)
    """

    return key.endswith(SECRET_SUFFIXES)


def redact(key: str, value: str) -> str:
    """Return *value*, or :data:`REDACTED` when *key* is a secret key."""

    return REDACTED if is_secret_key(key) else value


def _emit(level: int, message: str, fields: Mapping[str, Any]) -> None:
    if not _LOGGER.isEnabledFor(level):
        return
    _LOGGER.log(level, message, extra={"context": {"trace_id": TRACE_ID.get(), **fields}})
