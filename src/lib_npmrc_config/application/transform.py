"""Pure value transformations applied when configuration values are read.

Purpose
-------
Keep every string rewrite that happens between a raw ``.npmrc`` value and its
interpreted meaning in one I/O-free module: home-directory expansion,
environment-variable interpolation, boolean parsing and base64 decoding of
stored secrets.

Contents
--------
* :func:`expand_tilde` – replace a leading ``~`` with the home directory.
* :func:`expand_env_vars` – substitute ``${NAME}`` / ``${NAME?}`` references.
* :func:`parse_bool` – strict ``true``/``false`` parsing.
* :func:`decode_base64` – strict base64 → UTF-8 decoding for ``_password``.
* :func:`parse_legacy_auth` – split a legacy ``_auth`` value into its parts.

System Role
-----------
Invoked lazily by :class:`lib_npmrc_config.application.resolved.NpmrcConfig` at the
point a value is interpreted as a URL, secret, or path. Layers keep raw text.
"""

from __future__ import annotations

import base64
import binascii
import os
import re
from pathlib import Path
from typing import Mapping

from ..domain.errors import InvalidBase64, InvalidEncoding, InvalidLegacyAuth

_ENV_EXPR = re.compile(r"(?P<esc>\\*)\$\{(?P<name>[^${}?]+)(?P<mod>\?)?\}")

_SEPARATORS = frozenset({"/", os.sep, *([os.altsep] if os.altsep else [])})


def expand_tilde(path: str, home: str | Path | None) -> str:
    """Replace a leading ``~`` with *home* when followed by nothing or a separator.

    ``~user`` forms are never expanded and an unknown *home* leaves the value
    untouched.

    Examples
    --------
    >>> expand_tilde("~/.ssl/client.crt", "/home/demo")
    '/home/demo/.ssl/client.crt'
    >>> expand_tilde("~", "/home/demo")
    '/home/demo'
    >>> expand_tilde("~other/x", "/home/demo")
    '~other/x'
    >>> expand_tilde("~/x", None)
    '~/x'
    """

    if home is None or not path.startswith("~"):
        return path
    if len(path) == 1:
        return str(home)
    if path[1] not in _SEPARATORS:
        return path
    return str(Path(home) / path[2:]) if path[2:] else str(home)


def expand_env_vars(value: str, environ: Mapping[str, str] | None = None) -> str:
    """Interpolate ``${NAME}`` and ``${NAME?}`` references in *value*.

    Why
    ----
    ``.npmrc`` files commonly reference CI secrets (``${NPM_TOKEN}``) instead of
    storing them in plain text.

    What
    ----
    * ``${NAME}`` becomes the variable's value, or stays literal when unset.
    * ``${NAME?}`` becomes the variable's value, or ``""`` when unset.
    * An odd run of backslashes before ``${`` escapes the reference: half of the
      backslashes (rounded down) survive and the reference is emitted verbatim
      without a lookup. An even run keeps half of them and expands normally.

    Substitution is single-pass; substituted text is never re-expanded.

    Parameters
    ----------
    value:
        Raw configuration value.
    environ:
        Mapping consulted for variables. ``None`` reads the live
        :data:`os.environ` at call time.

    Examples
    --------
    >>> expand_env_vars("${TOKEN}", {"TOKEN": "abc"})
    'abc'
    >>> expand_env_vars("${MISSING}", {})
    '${MISSING}'
    >>> expand_env_vars("${MISSING?}", {})
    ''
    >>> expand_env_vars("\\\\${TOKEN}", {"TOKEN": "abc"})
    '${TOKEN}'
    """

    lookup = os.environ if environ is None else environ

    def _replace(match: re.Match[str]) -> str:
        escapes = match.group("esc")
        name = match.group("name")
        modifier = match.group("mod") or ""
        kept = escapes[: len(escapes) // 2]
        if len(escapes) % 2 == 1:
            return f"{kept}${{{name}{modifier}}}"
        resolved = lookup.get(name)
        if resolved is None:
            resolved = "" if modifier else f"${{{name}}}"
        return f"{kept}{resolved}"

    return _ENV_EXPR.sub(_replace, value)


def parse_bool(value: str) -> bool | None:
    """Return ``True``/``False`` for case-insensitive ``true``/``false``, else ``None``.

    >>> parse_bool("TRUE"), parse_bool("false"), parse_bool("1")
    (True, False, None)
    """

    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return None


def decode_base64(value: str) -> str:
    """Decode a standard-alphabet base64 *value* into UTF-8 text.

    Raises
    ------
    InvalidBase64
        When *value* is not strict base64.
    InvalidEncoding
        When the decoded bytes are not UTF-8.

    Examples
    --------
    >>> decode_base64("cGFzc3dvcmQ=")
    'password'
    """

    try:
        raw = base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidBase64(f"invalid base64 encoding: {exc}") from exc
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidEncoding(f"invalid UTF-8 in decoded value: {exc}") from exc


def parse_legacy_auth(auth: str) -> tuple[str, str]:
    """Decode a legacy ``_auth`` value into ``(username, password)``.

    The decoded text is split on its first colon so passwords may contain
    colons themselves; a value without any colon is rejected.

    Examples
    --------
    >>> parse_legacy_auth("dXNlcjpwYXNzd29yZA==")
    ('user', 'password')
    """

    decoded = decode_base64(auth)
    username, separator, password = decoded.partition(":")
    if not separator:
        raise InvalidLegacyAuth("decoded _auth value is not in 'username:password' form")
    return username, password
