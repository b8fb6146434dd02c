"""Domain-level configuration value objects.

Purpose
-------
Anchor the immutable :class:`ConfigLayer` that carries one loaded ``.npmrc``
file through the system. This module contains no I/O.

Contents
--------
* :data:`LEVELS` – the fixed priority order of configuration levels.
* :class:`SourceInfo` – typed metadata describing where a key came from.
* :class:`ConfigLayer` – one level's raw key/value data plus its source path.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Final, Mapping, TypedDict

#: Configuration levels ordered from highest to lowest priority.
LEVELS: Final[tuple[str, str, str]] = ("project", "user", "global")


class SourceInfo(TypedDict):
    """Describe the origin of an effective configuration key.

    Attributes
    ----------
    layer:
        Level name (``"project"``, ``"user"`` or ``"global"``).
    path:
        Filesystem path of the file that supplied the key.
    key:
        The configuration key itself.
    """

    layer: str
    path: str
    key: str


@dataclass(frozen=True, slots=True)
class ConfigLayer:
    """One loaded configuration file.

    Why
    ----
    Layers stay separate until queried so "is this key set at level N" is
    answerable without re-deriving a merge, and so a higher level masks a lower
    one key by key.

    What
    ----
    ``data`` holds raw, untransformed values; it is wrapped in a
    ``MappingProxyType`` during initialisation to enforce immutability.

    Examples
    --------
    >>> layer = ConfigLayer("user", Path("/home/demo/.npmrc"), {"registry": "https://r.example/"})
    >>> layer.get("registry")
    'https://r.example/'
    >>> layer.get("missing") is None
    True
    """

    level: str
    source: Path
    data: Mapping[str, str]

    def __post_init__(self) -> None:
        if self.level not in LEVELS:
            raise ValueError(f"unknown configuration level: {self.level}")
        object.__setattr__(self, "source", Path(self.source))
        object.__setattr__(self, "data", MappingProxyType(dict(self.data)))

    def get(self, key: str) -> str | None:
        """Return the raw value stored under *key* in this layer only."""

        return self.data.get(key)
