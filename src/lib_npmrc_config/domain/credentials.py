"""Registry authentication value objects.

Purpose
-------
Model the closed set of authentication shapes an ``.npmrc`` file can express
for one registry: bearer token, username/password, legacy ``_auth`` and client
certificate only. Each shape may carry a :class:`ClientCert` for mTLS.

Contents
--------
* :class:`ClientCert` – certificate + key file pair.
* :class:`Credentials` – common accessor surface shared by every variant.
* :class:`TokenCredentials`, :class:`BasicAuthCredentials`,
  :class:`LegacyAuthCredentials`, :class:`ClientCertCredentials` – variants.

System Role
-----------
Produced by :meth:`lib_npmrc_config.application.resolved.NpmrcConfig.credentials_for`
and consumed by HTTP clients. Secrets are excluded from ``repr`` so they never
end up in logs or tracebacks.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, slots=True)
class ClientCert:
    """Client certificate and private key paths used for mutual TLS."""

    certfile: Path
    keyfile: Path


class Credentials:
    """Accessor surface shared by all credential variants.

    Why
    ----
    Callers usually only care about "give me a token" or "give me a basic auth
    header"; the accessors answer that without ``isinstance`` ladders.
    """

    __slots__ = ()

    kind: str = "none"

    def client_cert(self) -> ClientCert | None:
        """Return the attached client certificate, if any."""

        return getattr(self, "cert", None)

    def token(self) -> str | None:
        """Return the bearer token for token-based auth."""

        return None

    def username_password(self) -> tuple[str, str] | None:
        """Return ``(username, password)`` for basic and legacy auth."""

        return None

    def basic_auth_header(self) -> str | None:
        """Return the base64 payload for an HTTP ``Authorization: Basic`` header."""

        return None


@dataclass(frozen=True, slots=True)
class TokenCredentials(Credentials):
    """Bearer token authentication (``:_authToken``)."""

    token_value: str = field(repr=False)
    cert: ClientCert | None = None

    kind = "token"

    def token(self) -> str | None:
        return self.token_value


@dataclass(frozen=True, slots=True)
class BasicAuthCredentials(Credentials):
    """Username plus decoded ``:_password`` authentication."""

    username: str
    password: str = field(repr=False)
    cert: ClientCert | None = None

    kind = "basic"

    def username_password(self) -> tuple[str, str] | None:
        return self.username, self.password

    def basic_auth_header(self) -> str | None:
        """Encode ``username:password`` as base64.

        >>> BasicAuthCredentials("user", "pass").basic_auth_header()
        'dXNlcjpwYXNz'
        """

        return base64.b64encode(f"{self.username}:{self.password}".encode("utf-8")).decode("ascii")


@dataclass(frozen=True, slots=True)
class LegacyAuthCredentials(Credentials):
    """Legacy ``:_auth`` authentication with the raw value kept for header reuse."""

    auth: str = field(repr=False)
    username: str
    password: str = field(repr=False)
    cert: ClientCert | None = None

    kind = "legacy"

    def username_password(self) -> tuple[str, str] | None:
        return self.username, self.password

    def basic_auth_header(self) -> str | None:
        return self.auth


@dataclass(frozen=True, slots=True)
class ClientCertCredentials(Credentials):
    """Client certificate without token or password."""

    cert: ClientCert

    kind = "cert"
