from __future__ import annotations

from pathlib import Path

from hypothesis import given
from hypothesis import strategies as st

from lib_npmrc_config.application.merge import iter_matching, lookup, merge_layers
from lib_npmrc_config.domain.config import ConfigLayer

PROJECT = ConfigLayer("project", Path("/work/.npmrc"), {"registry": "https://project/", "only-project": "p"})
USER = ConfigLayer("user", Path("/home/demo/.npmrc"), {"registry": "https://user/", "only-user": "u", "empty": ""})
GLOBAL = ConfigLayer("global", Path("/usr/local/etc/npmrc"), {"registry": "https://global/", "empty": "global"})


def test_lookup_prefers_highest_layer() -> None:
    value, layer = lookup((PROJECT, USER, GLOBAL), "registry")  # type: ignore[misc]
    assert value == "https://project/"
    assert layer is PROJECT


def test_lookup_skips_absent_layers() -> None:
    value, layer = lookup((None, None, GLOBAL), "registry")  # type: ignore[misc]
    assert (value, layer.level) == ("https://global/", "global")
    assert lookup((None, None, None), "registry") is None


def test_empty_value_in_higher_layer_masks_lower() -> None:
    value, layer = lookup((PROJECT, USER, GLOBAL), "empty")  # type: ignore[misc]
    assert value == ""
    assert layer is USER


def test_merge_layers_reports_provenance() -> None:
    merged, meta = merge_layers((PROJECT, USER, GLOBAL))
    assert merged == {
        "registry": "https://project/",
        "only-project": "p",
        "only-user": "u",
        "empty": "",
    }
    assert meta["registry"] == {"layer": "project", "path": "/work/.npmrc", "key": "registry"}
    assert meta["only-user"]["layer"] == "user"
    assert meta["empty"]["layer"] == "user"


def test_iter_matching_yields_masked_entries_lowest_first() -> None:
    matched = [
        (key, value, layer.level)
        for key, value, layer in iter_matching((PROJECT, USER, GLOBAL), lambda key: key == "registry")
    ]
    assert matched == [
        ("registry", "https://global/", "global"),
        ("registry", "https://user/", "user"),
        ("registry", "https://project/", "project"),
    ]
    assert list(iter_matching((None, None, None), lambda key: True)) == []


_DATA = st.dictionaries(st.sampled_from(["a", "b", "c", "d"]), st.text(max_size=5), max_size=4)


@given(project=_DATA, user=_DATA, global_=_DATA)
def test_merged_view_agrees_with_lookup(project: dict[str, str], user: dict[str, str], global_: dict[str, str]) -> None:
    layers = (
        ConfigLayer("project", Path("p"), project),
        ConfigLayer("user", Path("u"), user),
        ConfigLayer("global", Path("g"), global_),
    )
    merged, _ = merge_layers(layers)
    assert set(merged) == set(project) | set(user) | set(global_)
    for key, value in merged.items():
        found = lookup(layers, key)
        assert found is not None and found[0] == value
