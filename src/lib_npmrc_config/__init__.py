"""Public package surface for layered ``.npmrc`` configuration.

Load the project, user and global ``.npmrc`` files with :func:`load_config`,
then ask the returned :class:`NpmrcConfig` for registries and credentials::

    config = load_config()
    registry = config.registry_for("@myorg/package")
    credentials = config.credentials_for(registry)
"""

from __future__ import annotations

from .adapters.parsers.ini import parse_npmrc
from .application.registry import DEFAULT_REGISTRY, extract_scope, nerf_dart, parse_registry_url, scope_registry_key
from .application.resolved import EMPTY_CONFIG, NpmrcConfig
from .application.transform import decode_base64, expand_env_vars, expand_tilde, parse_bool
from .core import LoadOptions, load_config, load_config_file
from .domain.config import ConfigLayer, SourceInfo
from .domain.credentials import (
    BasicAuthCredentials,
    ClientCert,
    ClientCertCredentials,
    Credentials,
    LegacyAuthCredentials,
    TokenCredentials,
)
from .domain.errors import (
    ConfigError,
    FileNotFound,
    FileReadError,
    InvalidBase64,
    InvalidEncoding,
    InvalidLegacyAuth,
    InvalidUrl,
    ParseError,
)
from .observability import bind_trace_id, get_logger

__all__ = [
    "DEFAULT_REGISTRY",
    "EMPTY_CONFIG",
    "BasicAuthCredentials",
    "ClientCert",
    "ClientCertCredentials",
    "ConfigError",
    "ConfigLayer",
    "Credentials",
    "FileNotFound",
    "FileReadError",
    "InvalidBase64",
    "InvalidEncoding",
    "InvalidLegacyAuth",
    "InvalidUrl",
    "LegacyAuthCredentials",
    "LoadOptions",
    "NpmrcConfig",
    "ParseError",
    "SourceInfo",
    "TokenCredentials",
    "bind_trace_id",
    "decode_base64",
    "expand_env_vars",
    "expand_tilde",
    "extract_scope",
    "get_logger",
    "load_config",
    "load_config_file",
    "nerf_dart",
    "parse_bool",
    "parse_npmrc",
    "parse_registry_url",
    "scope_registry_key",
]
