"""Domain-level exception hierarchy.

Purpose
-------
Expose the stable error taxonomy shared by adapters, the composition root, and
consuming applications. The hierarchy lives in the domain layer so outer layers
(adapters, CLI) depend on it and never the other way around.

Contents
--------
* :class:`ConfigError` – umbrella base class for every library failure.
* :class:`FileNotFound` – an expected ``.npmrc`` file does not exist.
* :class:`FileReadError` – the file exists but could not be read.
* :class:`ParseError` – the file content is not valid ``key = value`` text.
* :class:`InvalidUrl` – a registry value is not an absolute URL.
* :class:`InvalidBase64` – a ``_password`` or ``_auth`` value is not base64.
* :class:`InvalidEncoding` – decoded secret bytes are not UTF-8 text.
* :class:`InvalidLegacyAuth` – a decoded ``_auth`` value lacks ``user:pass``.

System Role
-----------
Adapters raise :class:`FileNotFound` to signal an absent layer; the composition
root treats it as non-fatal and propagates everything else. Callers catch
:class:`ConfigError` to handle all library failures uniformly.
"""

from __future__ import annotations

from pathlib import Path


class ConfigError(Exception):
    """Base type for all exceptions emitted by ``lib_npmrc_config``.

    Why
    ----
    Provide a single catch-all type for consumers that do not need fine-grained
    handling.
    """


class FileNotFound(ConfigError):
    """Represents a missing configuration file.

    Why
    ----
    Allow adapters to signal absence without aborting the entire configuration
    load. The composition root turns this into an absent layer; only explicit
    single-file loads surface it to callers.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(f"config file not found: {self.path}")


class FileReadError(ConfigError):
    """Raised when a configuration file exists but cannot be read.

    Attributes
    ----------
    path:
        File that failed to read.
    cause:
        Underlying :class:`OSError` (also chained as ``__cause__``).
    """

    def __init__(self, path: str | Path, cause: BaseException) -> None:
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"failed to read config file {self.path}: {cause}")


class ParseError(ConfigError):
    """Raised when a configuration file cannot be interpreted as ``key = value`` text.

    Typical Sources
    ---------------
    The default ``.npmrc`` parser and the file loader (undecodable bytes).
    """

    def __init__(self, path: str | Path, message: str) -> None:
        self.path = Path(path)
        self.message = message
        super().__init__(f"failed to parse config file {self.path}: {message}")


class InvalidUrl(ConfigError):
    """Raised when a registry or scoped-registry value is not a usable URL."""

    def __init__(self, url: str, message: str) -> None:
        self.url = url
        self.message = message
        super().__init__(f"invalid URL '{url}': {message}")


class InvalidBase64(ConfigError):
    """Raised when a ``_password`` or ``_auth`` field is not valid base64."""


class InvalidEncoding(ConfigError):
    """Raised when decoded secret bytes are not valid UTF-8 text."""


class InvalidLegacyAuth(ConfigError):
    """Raised when a decoded ``_auth`` value is not shaped like ``username:password``."""
