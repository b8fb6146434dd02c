"""Filesystem path resolution for ``.npmrc`` layers.

Purpose
-------
Implement the :class:`lib_npmrc_config.application.ports.PathResolver`
protocol by encapsulating npm's discovery rules. The adapter is the only
component that understands project markers, home directories and how a global
prefix is derived from the ``node`` executable.

Contents
--------
* :class:`DefaultPathResolver` – resolves project root, home and global prefix.
* :func:`project_config_path` / :func:`user_config_path` /
  :func:`global_config_path` – map those anchors to concrete ``.npmrc`` files.

System Role
-----------
Feeds anchor directories into :func:`lib_npmrc_config.core.load_config`. It
honours injected environment mappings and platform identifiers so tests stay
deterministic across operating systems.
"""

from __future__ import annotations

import os
import shutil
import sys
from pathlib import Path
from typing import Callable, Mapping

from ...observability import log_debug

#: Markers that identify a project root while walking up from the cwd.
_PACKAGE_JSON = "package.json"
_NODE_MODULES = "node_modules"


class DefaultPathResolver:
    """Resolve anchor directories for each configuration level.

    Why
    ----
    Centralise path discovery so the composition root stays platform-agnostic
    and easy to test.
    """

    def __init__(
        self,
        *,
        env: Mapping[str, str] | None = None,
        platform: str | None = None,
        which: Callable[..., str | None] | None = None,
    ) -> None:
        """Store context required to resolve filesystem locations.

        Parameters
        ----------
        env:
            Optional environment mapping that overrides ``os.environ`` values
            (useful for deterministic tests).
        platform:
            Platform identifier (``sys.platform`` clone). Defaults to the
            current interpreter platform.
        which:
            Executable lookup compatible with :func:`shutil.which`.
        """

        self.env = {**os.environ, **(env or {})}
        self.platform = platform or sys.platform
        self._which = which or shutil.which

    @property
    def _is_windows(self) -> bool:
        """Return ``True`` when resolving for Windows."""

        return self.platform.startswith("win")

    def project_root(self, start_dir: Path) -> Path:
        """Return the nearest ancestor of *start_dir* containing a project marker.

        Why
        ----
        npm treats the closest directory holding ``package.json`` (file) or
        ``node_modules`` (directory) as the local prefix. Without a marker the
        start directory itself is used.

        Examples
        --------
        >>> from tempfile import TemporaryDirectory
        >>> tmp = TemporaryDirectory()
        >>> root = Path(tmp.name)
        >>> _ = (root / "package.json").write_text("{}", encoding="utf-8")
        >>> nested = root / "src" / "lib"
        >>> nested.mkdir(parents=True)
        >>> DefaultPathResolver().project_root(nested) == root
        True
        >>> tmp.cleanup()
        """

        for candidate in [start_dir, *start_dir.parents]:
            if (candidate / _PACKAGE_JSON).is_file() or (candidate / _NODE_MODULES).is_dir():
                log_debug("project_root_found", layer="project", path=str(candidate))
                return candidate
        return start_dir

    def home_directory(self) -> Path | None:
        """Return the user's home directory or ``None`` when it cannot be determined."""

        keys = ("USERPROFILE", "HOME") if self._is_windows else ("HOME",)
        for key in keys:
            value = self.env.get(key)
            if value:
                return Path(value)
        try:
            return Path.home()
        except RuntimeError:
            return None

    def global_prefix(self) -> Path | None:
        """Return npm's global prefix.

        What
        ----
        ``PREFIX`` from the environment wins. Otherwise the prefix is derived
        from the ``node`` executable on ``PATH``: its parent directory on
        Windows (``C:\\node\\node.exe`` → ``C:\\node``) and its grandparent
        elsewhere (``/usr/local/bin/node`` → ``/usr/local``). ``None`` means no
        installation was found.
        """

        explicit = self.env.get("PREFIX")
        if explicit:
            return Path(explicit)
        node = self._which("node", path=self.env.get("PATH"))
        if not node:
            log_debug("global_prefix_missing", layer="global", path=None)
            return None
        executable = Path(node)
        return executable.parent if self._is_windows else executable.parent.parent


def project_config_path(local_prefix: Path) -> Path:
    """Return ``{local_prefix}/.npmrc``."""

    return local_prefix / ".npmrc"


def user_config_path(home: Path | None) -> Path | None:
    """Return ``~/.npmrc`` or ``None`` when the home directory is unknown."""

    return home / ".npmrc" if home is not None else None


def global_config_path(global_prefix: Path) -> Path:
    """Return ``{global_prefix}/etc/npmrc``.

    >>> global_config_path(Path("/usr/local")).as_posix()
    '/usr/local/etc/npmrc'
    """

    return global_prefix / "etc" / "npmrc"
