"""``.npmrc`` file loader.

Purpose
-------
Convert one on-disk ``.npmrc`` file into the flat mapping a configuration layer
stores. Existence checks, I/O error wrapping, decoding and observability
policies live here so the composition root only decides what "absent" means.

Contents
--------
* :class:`NpmrcFileLoader` – reads, decodes and parses a single file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping

from ...application.ports import IniParser
from ...domain.errors import FileNotFound, FileReadError, ParseError
from ...observability import log_debug, log_error
from ..parsers.ini import NpmrcParser

_UTF8_BOM = "\ufeff"


class NpmrcFileLoader:
    """Load ``key = value`` configuration files."""

    def __init__(self, *, parser: IniParser | None = None) -> None:
        self._parser = parser or NpmrcParser()

    def _read(self, path: str) -> bytes:
        """Read *path* as bytes, raising :class:`FileNotFound` when the file is missing.

        Why
        ----
        A missing file is an absent layer, while a present-but-unreadable file
        (permissions on the file or an unsearchable parent, a directory in its
        place, I/O faults) must abort loading with the path and the cause.
        """

        try:
            payload = Path(path).read_bytes()
        except (FileNotFoundError, NotADirectoryError) as exc:
            raise FileNotFound(path) from exc
        except OSError as exc:
            log_error("config_file_unreadable", layer="file", path=path, error=str(exc))
            raise FileReadError(path, exc) from exc
        log_debug("config_file_read", layer="file", path=path, size=len(payload))
        return payload

    def load(self, path: str) -> Mapping[str, str]:
        """Return the key/value pairs stored in the file at *path*.

        Raises
        ------
        FileNotFound
            When *path* does not exist.
        FileReadError
            When *path* exists but cannot be read.
        ParseError
            When the content is not UTF-8 or the parser rejects it.

        Examples
        --------
        >>> from tempfile import NamedTemporaryFile
        >>> tmp = NamedTemporaryFile('w', delete=False, encoding='utf-8', suffix='.npmrc')
        >>> _ = tmp.write('registry = https://npm.example.com/')
        >>> tmp.close()
        >>> NpmrcFileLoader().load(tmp.name)["registry"]
        'https://npm.example.com/'
        >>> Path(tmp.name).unlink()
        """

        try:
            text = self._read(path).decode("utf-8")
        except UnicodeDecodeError as exc:
            log_error("config_file_invalid", layer="file", path=path, error=str(exc))
            raise ParseError(path, f"content is not valid UTF-8: {exc}") from exc
        if text.startswith(_UTF8_BOM):
            text = text[len(_UTF8_BOM) :]
        try:
            data = self._parser.parse(text, source=path)
        except ParseError as exc:
            log_error("config_file_invalid", layer="file", path=path, error=exc.message)
            raise
        log_debug("config_file_loaded", layer="file", path=path, keys=len(data))
        return data
