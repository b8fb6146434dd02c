"""Resolved ``.npmrc`` configuration.

Purpose
-------
Provide the aggregate, read-only view over the project, user and global layers:
priority-ordered key lookup, registry resolution for (possibly scoped) package
names, and credential derivation for a registry URL.

Contents
--------
* :class:`NpmrcConfig` – ``Mapping`` over the effective raw values plus the
  registry and credential queries.

System Role
-----------
Built by :func:`lib_npmrc_config.core.load_config`. Layers are kept separate in
a fixed-length tuple; value transforms (environment expansion, tilde expansion,
base64 decoding) run at the moment a value is interpreted, never at load time,
and the environment is consulted live on every call.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping as MappingABC
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from ..domain.config import LEVELS, ConfigLayer, SourceInfo
from ..domain.credentials import (
    BasicAuthCredentials,
    ClientCert,
    ClientCertCredentials,
    Credentials,
    LegacyAuthCredentials,
    TokenCredentials,
)
from ..domain.errors import InvalidUrl
from ..observability import log_debug, log_warning
from .merge import iter_matching, lookup, merge_layers
from .registry import DEFAULT_REGISTRY, extract_scope, nerf_dart, parse_registry_url, scope_registry_key
from .transform import decode_base64, expand_env_vars, expand_tilde, parse_bool, parse_legacy_auth

Layers = tuple[ConfigLayer | None, ConfigLayer | None, ConfigLayer | None]

_SCOPED_REGISTRY_SUFFIX = ":registry"


@dataclass(frozen=True, slots=True)
class NpmrcConfig(MappingABC[str, str]):
    """Immutable view over up to three ``.npmrc`` layers.

    Why
    ----
    Callers need one object that answers "which registry serves this package"
    and "how do I authenticate against it" while the precedence rules
    (project > user > global) stay encapsulated.

    What
    ----
    Implements the :class:`Mapping` protocol over the effective *raw* values
    (no expansion). Registry and credential queries apply environment and
    tilde expansion to the values they interpret.

    Parameters
    ----------
    layers:
        ``(project, user, global)``; absent levels are ``None``.
    global_prefix / local_prefix / home:
        Resolved anchor directories, each optional.
    environ:
        Mapping used for ``${VAR}`` expansion. ``None`` reads the live
        :data:`os.environ` on every call.

    Examples
    --------
    >>> project = ConfigLayer("project", Path("/work/.npmrc"), {"@acme:registry": "https://npm.acme.test"})
    >>> user = ConfigLayer("user", Path("/home/demo/.npmrc"), {"//npm.acme.test/:_authToken": "${TOKEN}"})
    >>> cfg = NpmrcConfig((project, user, None), environ={"TOKEN": "s3cret"})
    >>> cfg.registry_for("@acme/widget")
    'https://npm.acme.test/'
    >>> cfg.credentials_for("https://npm.acme.test/").token()
    's3cret'
    >>> cfg.registry_for("lodash")
    'https://registry.npmjs.org/'
    """

    layers: Layers = (None, None, None)
    global_prefix: Path | None = None
    local_prefix: Path | None = None
    home: Path | None = None
    environ: Mapping[str, str] | None = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        layers = tuple(self.layers)
        if len(layers) != len(LEVELS):
            raise ValueError(f"expected {len(LEVELS)} layers ordered {LEVELS}, got {len(layers)}")
        for level, layer in zip(LEVELS, layers):
            if layer is not None and layer.level != level:
                raise ValueError(f"layer for {layer.source} is '{layer.level}' but sits at the '{level}' position")
        object.__setattr__(self, "layers", layers)

    # -- Mapping protocol -------------------------------------------------

    def __getitem__(self, key: str) -> str:
        found = lookup(self.layers, key)
        if found is None:
            raise KeyError(key)
        return found[0]

    def __iter__(self) -> Iterator[str]:
        return iter(self.as_dict())

    def __len__(self) -> int:
        return len(self.as_dict())

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the raw value for *key* from the highest layer defining it.

        No transformation is applied; ``${VAR}`` references come back verbatim.
        """

        found = lookup(self.layers, key)
        return default if found is None else found[0]

    def origin(self, key: str) -> SourceInfo | None:
        """Return provenance for *key* or ``None`` when no layer defines it."""

        found = lookup(self.layers, key)
        if found is None:
            return None
        layer = found[1]
        return {"layer": layer.level, "path": str(layer.source), "key": key}

    def as_dict(self) -> dict[str, str]:
        """Return a mutable copy of the effective raw key/value pairs."""

        return merge_layers(self.layers)[0]

    def provenance(self) -> dict[str, SourceInfo]:
        """Return :class:`SourceInfo` for every effective key."""

        return merge_layers(self.layers)[1]

    def get_bool(self, key: str) -> bool | None:
        """Interpret the effective value of *key* as a strict boolean.

        Returns ``None`` when the key is unset or not ``true``/``false``.
        """

        value = self._read(key)
        return None if value is None else parse_bool(value)

    # -- Registries -------------------------------------------------------

    def default_registry(self) -> str:
        """Return the configured ``registry`` (normalised) or :data:`DEFAULT_REGISTRY`.

        Raises
        ------
        InvalidUrl
            When a ``registry`` value is configured but malformed.
        """

        configured = self._read("registry")
        if configured is None:
            return DEFAULT_REGISTRY
        return parse_registry_url(configured)

    def registry_for(self, package_name: str) -> str:
        """Return the registry serving *package_name*.

        Scoped names (``@scope/pkg``) use ``@scope:registry`` when configured;
        everything else uses :meth:`default_registry`.
        """

        scope = extract_scope(package_name)
        if scope is not None:
            configured = self._read(scope_registry_key(scope))
            if configured is not None:
                return parse_registry_url(configured)
        return self.default_registry()

    def scoped_registries(self) -> dict[str, str]:
        """Return every configured ``scope → registry URL`` pair.

        Layers are scanned from global to project and a valid higher-layer URL
        replaces a lower one for the same scope. An entry whose URL cannot be
        parsed is skipped and logged on its own: it neither fails the scan nor
        hides a valid URL configured for that scope in a lower layer.
        Per-package lookups via :meth:`registry_for` stay strict.
        """

        result: dict[str, str] = {}
        for key, raw, layer in iter_matching(self.layers, _is_scoped_registry_key):
            scope = key[: -len(_SCOPED_REGISTRY_SUFFIX)]
            try:
                result[scope] = parse_registry_url(expand_env_vars(raw, self.environ))
            except InvalidUrl as exc:
                log_warning(
                    "scoped_registry_skipped",
                    layer=layer.level,
                    path=str(layer.source),
                    scope=scope,
                    error=exc.message,
                )
        return result

    # -- Credentials ------------------------------------------------------

    def credentials_for(self, registry_url: str) -> Credentials | None:
        """Derive the credentials configured for *registry_url*.

        What
        ----
        Computes the nerf-dart prefix and checks, in order: ``:_authToken``
        (token), ``:_password`` + ``:username`` (basic), ``:_auth`` (legacy),
        then ``:certfile`` + ``:keyfile`` alone (certificate only). A complete
        certificate pair is attached to whichever auth type wins.

        Raises
        ------
        InvalidUrl
            When *registry_url* is not an absolute URL.
        InvalidBase64 / InvalidEncoding / InvalidLegacyAuth
            When a stored secret for this registry cannot be decoded.
        """

        prefix = nerf_dart(registry_url)
        cert = self._client_cert(prefix)
        credentials: Credentials | None

        token = self._read(f"{prefix}:_authToken")
        username = self._read(f"{prefix}:username")
        password = self._read(f"{prefix}:_password")
        auth = self._read(f"{prefix}:_auth")
        if token is not None:
            credentials = TokenCredentials(token, cert)
        elif username is not None and password is not None:
            credentials = BasicAuthCredentials(username, decode_base64(password), cert)
        elif auth is not None:
            legacy_user, legacy_password = parse_legacy_auth(auth)
            credentials = LegacyAuthCredentials(auth, legacy_user, legacy_password, cert)
        elif cert is not None:
            credentials = ClientCertCredentials(cert)
        else:
            credentials = None

        log_debug(
            "credentials_resolved",
            registry=prefix,
            kind=credentials.kind if credentials is not None else None,
            client_cert=cert is not None,
        )
        return credentials

    def _client_cert(self, prefix: str) -> ClientCert | None:
        """Return the certificate pair for *prefix* when both halves are configured."""

        certfile = self._read(f"{prefix}:certfile")
        keyfile = self._read(f"{prefix}:keyfile")
        if certfile is None or keyfile is None:
            return None
        return ClientCert(
            certfile=Path(expand_tilde(certfile, self.home)),
            keyfile=Path(expand_tilde(keyfile, self.home)),
        )

    def _read(self, key: str) -> str | None:
        """Return the effective value of *key* with ``${VAR}`` references expanded."""

        raw = self.get(key)
        return None if raw is None else expand_env_vars(raw, self.environ)

    # -- Layer introspection ----------------------------------------------

    @property
    def project_layer(self) -> ConfigLayer | None:
        return self.layers[0]

    @property
    def user_layer(self) -> ConfigLayer | None:
        return self.layers[1]

    @property
    def global_layer(self) -> ConfigLayer | None:
        return self.layers[2]

    def has_project_config(self) -> bool:
        """Return ``True`` when a project ``.npmrc`` was loaded."""

        return self.project_layer is not None

    def has_user_config(self) -> bool:
        """Return ``True`` when a user ``.npmrc`` was loaded."""

        return self.user_layer is not None

    def has_global_config(self) -> bool:
        """Return ``True`` when a global ``npmrc`` was loaded."""

        return self.global_layer is not None

    def project_config_path(self) -> Path | None:
        return _source(self.project_layer)

    def user_config_path(self) -> Path | None:
        return _source(self.user_layer)

    def global_config_path(self) -> Path | None:
        return _source(self.global_layer)


def _source(layer: ConfigLayer | None) -> Path | None:
    return layer.source if layer is not None else None


def _is_scoped_registry_key(key: str) -> bool:
    return key.startswith("@") and key.endswith(_SCOPED_REGISTRY_SUFFIX) and len(key) > len(_SCOPED_REGISTRY_SUFFIX) + 1


#: Configuration with no layers; every query falls back to defaults.
EMPTY_CONFIG = NpmrcConfig()
