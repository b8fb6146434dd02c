"""Application-layer precedence policy.

Purpose
-------
Answer "which layer supplies this key?" over an ordered stack of optional
layers without ever materialising a mutable merged dictionary inside the
configuration object. Layers are passed highest priority first
(``project → user → global``); absent levels are ``None``.

Contents
    - ``lookup``: first value for one key plus the layer that supplied it.
    - ``merge_layers``: flat effective view with provenance, for display and
      bulk scans.
    - ``iter_matching``: every value, masked or not, for keys accepted by a
      predicate, lowest priority first.

System Role
-----------
Used by :class:`lib_npmrc_config.application.resolved.NpmrcConfig`. Stays free of I/O
so alternative composition roots can reuse it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Iterable, Iterator

if TYPE_CHECKING:
    from ..domain.config import ConfigLayer, SourceInfo


def lookup(layers: Iterable[ConfigLayer | None], key: str) -> tuple[str, ConfigLayer] | None:
    """Return ``(raw_value, layer)`` from the highest layer defining *key*.

    A key present in a higher layer always masks lower layers, even when the
    higher value is empty.
    """

    for layer in layers:
        if layer is not None and key in layer.data:
            return layer.data[key], layer
    return None


def merge_layers(layers: Iterable[ConfigLayer | None]) -> tuple[dict[str, str], dict[str, SourceInfo]]:
    """Flatten *layers* into ``(effective_values, provenance)``.

    Why
    ----
    Tooling (CLI ``show``, debugging) wants the effective configuration and an
    explanation of which file supplied each key.

    What
    ----
    Walks the stack from lowest to highest priority so later (higher) layers
    overwrite earlier ones; whole values are replaced, never combined.
    """

    merged: dict[str, str] = {}
    meta: dict[str, SourceInfo] = {}
    for layer in reversed([entry for entry in layers if entry is not None]):
        for key, value in layer.data.items():
            merged[key] = value
            meta[key] = {"layer": layer.level, "path": str(layer.source), "key": key}
    return merged, meta


def iter_matching(
    layers: Iterable[ConfigLayer | None], predicate: Callable[[str], bool]
) -> Iterator[tuple[str, str, ConfigLayer]]:
    """Yield every ``(key, raw_value, layer)`` whose key satisfies *predicate*.

    Entries come lowest priority first and masked values are included, so a
    caller that validates values can let a valid lower entry survive an invalid
    higher one by overwriting only on success.
    """

    for layer in reversed([entry for entry in layers if entry is not None]):
        for key, value in layer.data.items():
            if predicate(key):
                yield key, value, layer
