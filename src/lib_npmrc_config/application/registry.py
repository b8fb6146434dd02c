"""Registry URL canonicalisation and scope helpers.

Purpose
-------
Translate registry URLs into the scheme-less "nerf-dart" keys under which
``.npmrc`` stores per-registry credentials, and map package scopes to the
config keys holding scoped registry overrides. The algorithm must match npm's
own behaviour exactly so that existing ``.npmrc`` files keep working.

Contents
--------
* :data:`DEFAULT_REGISTRY` – registry used when none is configured.
* :func:`nerf_dart` – ``https://host/path/pkg`` → ``//host/path/``.
* :func:`extract_scope` / :func:`scope_registry_key` – scope handling.
* :func:`parse_registry_url` – validate and normalise a registry URL.
"""

from __future__ import annotations

import re
from typing import Final
from urllib.parse import SplitResult, urlsplit, urlunsplit

from ..domain.errors import InvalidUrl

DEFAULT_REGISTRY: Final[str] = "https://registry.npmjs.org/"

_DEFAULT_PORTS: Final[dict[str, int]] = {"http": 80, "https": 443}

#: WHATWG forbidden domain code points: C0 controls, space and URL delimiters.
_FORBIDDEN_HOST = re.compile(r"[\x00-\x20#%/:<>?@\[\\\]^|\x7f]")


def nerf_dart(url: str) -> str:
    """Return the credential-lookup key for the registry *url*.

    Why
    ----
    npm scopes credentials to ``//host[:port]/path/`` so the same token applies
    over http and https while never leaking to other hosts.

    What
    ----
    Drops scheme, userinfo, query and fragment; keeps the port only when it is
    not the scheme default; reduces the path to its directory (everything up to
    and including the last ``/``), mirroring ``new URL('.', url)``.

    Examples
    --------
    >>> nerf_dart("https://registry.npmjs.org")
    '//registry.npmjs.org/'
    >>> nerf_dart("http://registry.npmjs.org:80/")
    '//registry.npmjs.org/'
    >>> nerf_dart("https://user:pw@my-couch:5984/registry/_design/app/rewrite/pkg?write=true#x")
    '//my-couch:5984/registry/_design/app/rewrite/'
    """

    parts = _split(url)
    path = parts.path or "/"
    if not path.endswith("/"):
        path = path[: path.rfind("/") + 1] or "/"
    return f"//{_host_port(parts, url)}{path}"


def extract_scope(package_name: str) -> str | None:
    """Return the ``@scope`` prefix of *package_name* or ``None`` when unscoped.

    >>> extract_scope("@myorg/pkg"), extract_scope("@scope"), extract_scope("lodash")
    ('@myorg', '@scope', None)
    """

    if not package_name.startswith("@"):
        return None
    scope, _, _ = package_name.partition("/")
    return scope


def scope_registry_key(scope: str) -> str:
    """Return the config key holding the registry override for *scope*.

    >>> scope_registry_key("@myorg")
    '@myorg:registry'
    """

    return f"{scope}:registry"


def parse_registry_url(raw: str) -> str:
    """Validate *raw* as an absolute registry URL and ensure a trailing ``/`` path.

    Raises
    ------
    InvalidUrl
        When *raw* lacks a scheme or host, or carries an invalid port.

    Examples
    --------
    >>> parse_registry_url("https://npm.example.com/npm")
    'https://npm.example.com/npm/'
    >>> parse_registry_url("https://registry.npmjs.org")
    'https://registry.npmjs.org/'
    """

    parts = _split(raw)
    _host_port(parts, raw)
    path = parts.path if parts.path.endswith("/") else f"{parts.path}/"
    return urlunsplit((parts.scheme, parts.netloc, path, parts.query, parts.fragment))


def _split(url: str) -> SplitResult:
    """Split *url* and reject values that are not absolute, host-bearing URLs."""

    candidate = url.strip()
    try:
        parts = urlsplit(candidate)
    except ValueError as exc:
        raise InvalidUrl(url, str(exc)) from exc
    if not parts.scheme:
        raise InvalidUrl(url, "relative URL without a base")
    if not parts.hostname:
        raise InvalidUrl(url, "empty host")
    if "[" not in parts.netloc and _FORBIDDEN_HOST.search(parts.hostname):
        raise InvalidUrl(url, "invalid domain character")
    return parts


def _host_port(parts: SplitResult, url: str) -> str:
    """Render ``host[:port]``, omitting the port when it is the scheme default."""

    try:
        port = parts.port
    except ValueError as exc:
        raise InvalidUrl(url, "invalid port number") from exc
    host = parts.hostname or ""
    if ":" in host:
        host = f"[{host}]"
    if port is None or port == _DEFAULT_PORTS.get(parts.scheme.lower()):
        return host
    return f"{host}:{port}"
