"""Application-layer ports describing adapter responsibilities.

Purpose
-------
Define the structural contracts that collaborators must satisfy so the
composition root can orchestrate loading without depending on concrete
filesystem or parsing implementations.

Contents
--------
* :class:`PathResolver` – locates the project root, home directory and global
  prefix.
* :class:`IniParser` – turns ``.npmrc`` text into flat key/value pairs.
* :class:`FileLoader` – reads one ``.npmrc`` file into a mapping.

System Role
-----------
Each default adapter implements one protocol; tests substitute fakes through
these seams.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Protocol, runtime_checkable


@runtime_checkable
class PathResolver(Protocol):
    """Discover the directories that anchor each configuration level."""

    def project_root(self, start_dir: Path) -> Path:
        """Return the nearest ancestor of *start_dir* holding a project marker, else *start_dir*."""

    def home_directory(self) -> Path | None:
        """Return the user's home directory, or ``None`` when unknown."""

    def global_prefix(self) -> Path | None:
        """Return the global installation prefix, or ``None`` when not installed."""


@runtime_checkable
class IniParser(Protocol):
    """Tokenise ``.npmrc`` text into opaque keys and raw string values."""

    def parse(self, text: str, *, source: str = "<string>") -> Mapping[str, str]:
        """Return key/value pairs or raise :class:`~lib_npmrc_config.domain.errors.ParseError`."""


@runtime_checkable
class FileLoader(Protocol):
    """Read a single configuration file."""

    def load(self, path: str) -> Mapping[str, str]:
        """Return the parsed mapping, raising ``FileNotFound``, ``FileReadError`` or ``ParseError``."""
