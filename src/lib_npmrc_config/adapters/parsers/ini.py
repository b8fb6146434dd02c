"""``.npmrc`` line parser.

Purpose
-------
Implement the :class:`lib_npmrc_config.application.ports.IniParser` protocol
for the flat ``key = value`` dialect used by ``.npmrc`` files. Generic INI
parsers treat ``//host/:_authToken`` or ``@scope:registry`` keys as comments or
section syntax, so keys are kept as opaque strings here.

Rules
-----
* Surrounding whitespace on keys and values is insignificant.
* Blank lines and lines starting with ``#`` or ``;`` are ignored.
* Lines without ``=`` and lines with an empty key are ignored, as npm does.
* Values keep any further ``=`` characters; later duplicates win.
* Values are stored raw: environment expansion happens at read time.
"""

from __future__ import annotations

from ...domain.errors import ParseError
from ...observability import log_debug

_COMMENT_PREFIXES = ("#", ";")


class NpmrcParser:
    """Parse ``.npmrc`` text into a flat ``dict``."""

    def parse(self, text: str, *, source: str = "<string>") -> dict[str, str]:
        """Return the key/value pairs found in *text*.

        Raises
        ------
        ParseError
            When *text* contains a NUL character, which never appears in a
            genuine text configuration file.

        Examples
        --------
        >>> NpmrcParser().parse("registry = https://r.example/\\n# note\\n//r.example/:_authToken=a=b")
        {'registry': 'https://r.example/', '//r.example/:_authToken': 'a=b'}
        """

        result: dict[str, str] = {}
        for line_number, raw_line in enumerate(text.splitlines(), start=1):
            if "\x00" in raw_line:
                raise ParseError(source, f"unexpected NUL byte on line {line_number}")
            line = raw_line.strip()
            if not line or line.startswith(_COMMENT_PREFIXES):
                continue
            key, separator, value = line.partition("=")
            key = key.strip()
            if not separator or not key:
                log_debug("npmrc_line_ignored", path=source, line=line_number)
                continue
            result[key] = value.strip()
        return result


def parse_npmrc(text: str, *, source: str = "<string>") -> dict[str, str]:
    """Module-level shortcut for :meth:`NpmrcParser.parse`."""

    return NpmrcParser().parse(text, source=source)
