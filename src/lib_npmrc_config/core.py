"""Composition root for ``lib_npmrc_config``.

Purpose
-------
Provide the entry points that orchestrate path resolution, file loading and
layer assembly into an :class:`~lib_npmrc_config.application.resolved.NpmrcConfig`.

Contents
--------
* :class:`LoadOptions` – caller overrides for discovery and layer skipping.
* :func:`load_config` – discover and load the project, user and global layers.
* :func:`load_config_file` – load exactly one file as the project layer.
* :func:`load_layer` – load one level's file into a layer or ``None``.

System Role
-----------
Connects adapters (path resolver, file loader) with the application view while
emitting structured observability signals. It is the canonical place to adjust
which file backs which level.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .adapters.file_loaders.npmrc import NpmrcFileLoader
from .adapters.path_resolvers.default import (
    DefaultPathResolver,
    global_config_path,
    project_config_path,
    user_config_path,
)
from .application.ports import FileLoader, PathResolver
from .application.resolved import NpmrcConfig
from .domain.config import ConfigLayer
from .domain.errors import FileNotFound
from .observability import log_debug, log_info, make_event, trace_scope


@dataclass(frozen=True, slots=True)
class LoadOptions:
    """Overrides accepted by :func:`load_config`.

    Attributes
    ----------
    cwd:
        Starting directory for project-root discovery (defaults to the CWD).
    global_prefix:
        Global prefix to use instead of the discovered one.
    user_config:
        User config file to use instead of ``~/.npmrc``.
    skip_project / skip_user / skip_global:
        Force the corresponding layer absent regardless of file presence.
    """

    cwd: Path | None = None
    global_prefix: Path | None = None
    user_config: Path | None = None
    skip_project: bool = False
    skip_user: bool = False
    skip_global: bool = False


def load_config(
    options: LoadOptions | None = None,
    *,
    resolver: PathResolver | None = None,
    loader: FileLoader | None = None,
    environ: Mapping[str, str] | None = None,
) -> NpmrcConfig:
    """Load the layered ``.npmrc`` configuration.

    Why
    ----
    Consumers need one call that finds and reads every level with npm's rules
    and hands back an immutable, queryable view.

    What
    ----
    Resolves anchors via *resolver*, loads ``{local_prefix}/.npmrc``,
    ``~/.npmrc`` (or ``options.user_config``) and ``{global_prefix}/etc/npmrc``.
    Missing files become absent layers; any other failure aborts the load.

    Parameters
    ----------
    options:
        :class:`LoadOptions`; defaults apply when omitted.
    resolver / loader:
        Collaborator overrides (mainly for tests and embedding).
    environ:
        Mapping used for ``${VAR}`` expansion at read time; ``None`` means the
        live process environment.

    Raises
    ------
    FileReadError / ParseError
        When an existing file cannot be read or parsed.

    Side Effects
    ------------
    Binds a fresh trace identifier for the duration of the load and emits
    structured log events per layer.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> tmp = TemporaryDirectory()
    >>> root = Path(tmp.name)
    >>> _ = (root / "package.json").write_text("{}", encoding="utf-8")
    >>> _ = (root / ".npmrc").write_text("registry = https://npm.example.com", encoding="utf-8")
    >>> cfg = load_config(LoadOptions(cwd=root, skip_user=True, skip_global=True))
    >>> cfg.has_project_config(), cfg.default_registry()
    (True, 'https://npm.example.com/')
    >>> tmp.cleanup()
    """

    opts = options or LoadOptions()
    resolver = resolver or DefaultPathResolver()
    loader = loader or NpmrcFileLoader()
    with trace_scope(uuid.uuid4().hex):
        return _assemble(opts, resolver, loader, environ)


def _assemble(
    opts: LoadOptions,
    resolver: PathResolver,
    loader: FileLoader,
    environ: Mapping[str, str] | None,
) -> NpmrcConfig:
    """Resolve anchors, load each level and wrap the layers."""

    cwd = opts.cwd or Path.cwd()
    local_prefix = resolver.project_root(cwd)
    home = resolver.home_directory()
    global_prefix = opts.global_prefix or resolver.global_prefix()

    global_path = global_config_path(global_prefix) if global_prefix is not None else None
    user_path = opts.user_config or user_config_path(home)

    project = load_layer("project", project_config_path(local_prefix), loader, skip=opts.skip_project)
    user = load_layer("user", user_path, loader, skip=opts.skip_user)
    global_layer = load_layer("global", global_path, loader, skip=opts.skip_global)

    config = NpmrcConfig(
        (project, user, global_layer),
        global_prefix=global_prefix,
        local_prefix=local_prefix,
        home=home,
        environ=environ,
    )
    log_info(
        "configuration_loaded",
        layer="final",
        path=None,
        levels=[layer.level for layer in config.layers if layer is not None],
    )
    return config


def load_config_file(
    path: str | Path,
    *,
    resolver: PathResolver | None = None,
    loader: FileLoader | None = None,
    environ: Mapping[str, str] | None = None,
) -> NpmrcConfig:
    """Load a single file as the project layer, bypassing discovery.

    Raises
    ------
    FileNotFound
        When *path* does not exist (unlike :func:`load_config`, absence is an
        error because the caller named the file explicitly).
    """

    resolver = resolver or DefaultPathResolver()
    loader = loader or NpmrcFileLoader()

    source = Path(path)
    with trace_scope(uuid.uuid4().hex):
        data = loader.load(str(source))
        log_debug("layer_loaded", **make_event("project", str(source), {"keys": len(data)}))
    project = ConfigLayer("project", source, data)
    return NpmrcConfig(
        (project, None, None),
        global_prefix=resolver.global_prefix(),
        local_prefix=resolver.project_root(Path.cwd()),
        home=resolver.home_directory(),
        environ=environ,
    )


def load_layer(level: str, path: Path | None, loader: FileLoader, *, skip: bool = False) -> ConfigLayer | None:
    """Load *path* as the *level* layer, returning ``None`` when absent or skipped.

    Examples
    --------
    >>> load_layer("user", Path("/nonexistent/.npmrc"), NpmrcFileLoader()) is None
    True
    """

    if skip:
        log_debug("layer_skipped", **make_event(level, str(path) if path else None))
        return None
    if path is None:
        log_debug("layer_missing", **make_event(level, None))
        return None
    try:
        data = loader.load(str(path))
    except FileNotFound:
        log_debug("layer_missing", **make_event(level, str(path)))
        return None
    log_debug("layer_loaded", **make_event(level, str(path), {"keys": len(data)}))
    return ConfigLayer(level, path, data)


__all__ = [
    "LoadOptions",
    "NpmrcConfig",
    "load_config",
    "load_config_file",
    "load_layer",
]
