from __future__ import annotations

from pathlib import Path

from lib_npmrc_config.domain.credentials import (
    BasicAuthCredentials,
    ClientCert,
    ClientCertCredentials,
    LegacyAuthCredentials,
    TokenCredentials,
)

CERT = ClientCert(certfile=Path("/certs/client.crt"), keyfile=Path("/certs/client.key"))


def test_token_accessors() -> None:
    creds = TokenCredentials("my-token")
    assert creds.kind == "token"
    assert creds.token() == "my-token"
    assert creds.username_password() is None
    assert creds.basic_auth_header() is None
    assert creds.client_cert() is None


def test_basic_auth_accessors() -> None:
    creds = BasicAuthCredentials("user", "pass", CERT)
    assert creds.token() is None
    assert creds.username_password() == ("user", "pass")
    assert creds.basic_auth_header() == "dXNlcjpwYXNz"
    assert creds.client_cert() == CERT


def test_legacy_auth_reuses_raw_value_for_header() -> None:
    creds = LegacyAuthCredentials("dXNlcjpwYXNz", "user", "pass")
    assert creds.kind == "legacy"
    assert creds.username_password() == ("user", "pass")
    assert creds.basic_auth_header() == "dXNlcjpwYXNz"


def test_cert_only_exposes_certificate() -> None:
    creds = ClientCertCredentials(CERT)
    assert creds.client_cert() == CERT
    assert creds.token() is None
    assert creds.username_password() is None


def test_repr_redacts_secrets() -> None:
    rendered = " ".join(
        repr(item)
        for item in (
            TokenCredentials("tok-SECRET"),
            BasicAuthCredentials("user", "pw-SECRET"),
            LegacyAuthCredentials("auth-SECRET", "user", "pw-SECRET"),
        )
    )
    assert "SECRET" not in rendered
    assert "user" in rendered
