from __future__ import annotations

import json
from pathlib import Path

import pytest
from pytest import MonkeyPatch

from flightdeck import databuild
from flightdeck.databuild import build_agents, build_features, load_source, write_tables
from flightdeck.exceptions import DataTableError
from flightdeck.tables import load_tables, merge_aliases, parse_agents, parse_features

WEB_FEATURES = {
    "features": {
        "view-transitions": {
            "kind": "feature",
            "name": "View transitions",
            "caniuse": "view-transitions",
            "status": {
                "baseline": "low",
                "support": {"chrome": "111", "chrome_android": "111", "safari": "18", "ie": "1"},
            },
        },
        "dialog": {
            "kind": "feature",
            "name": "<dialog>",
            "spec": ["https://html.spec.whatwg.org/#the-dialog-element"],
            "status": {"baseline": "high", "support": {"firefox": "98"}},
        },
        "old-name": {"kind": "moved", "redirect_target": "dialog"},
        "mystery": {"kind": "feature", "status": {"baseline": "maybe"}},
    }
}


def test_build_features_maps_status_and_browsers() -> None:
    features = build_features(WEB_FEATURES)

    assert list(features) == ["dialog", "view-transitions"]
    assert features["view-transitions"] == {
        "title": "View transitions",
        "status": "newly",
        "minBrowserVersions": {"and_chr": "111", "chrome": "111", "safari": "18"},
        "docLink": "https://caniuse.com/view-transitions",
    }
    assert features["dialog"]["status"] == "widely"
    assert features["dialog"]["docLink"] == "https://html.spec.whatwg.org/#the-dialog-element"


def test_build_features_restricted_to_ids() -> None:
    assert list(build_features(WEB_FEATURES, {"dialog", "not-there"})) == ["dialog"]


def test_build_features_output_loads_as_table() -> None:
    definitions = parse_features(build_features(WEB_FEATURES))

    assert definitions["view-transitions"].status == "newly"
    assert definitions["dialog"].min_browser_versions == {"firefox": "98"}


def test_build_features_rejects_bad_input() -> None:
    with pytest.raises(DataTableError):
        build_features([])
    with pytest.raises(DataTableError):
        build_features({"features": []})


def test_build_agents_keeps_released_versions() -> None:
    caniuse = {
        "agents": {
            "firefox": {
                "version_list": [
                    {"version": "120", "global_usage": 1.25, "release_date": 1700000000},
                    {"version": "121", "global_usage": None, "release_date": 1702000000},
                    {"version": "122", "global_usage": 0, "release_date": None},
                ]
            },
            "unreleased": {"version_list": [{"version": "1", "release_date": None}]},
        }
    }

    agents = build_agents(caniuse)

    assert agents == {"firefox": [["120", 1.25], ["121", 0.0]]}
    assert parse_agents(agents)["firefox"] == (("120", 1.25), ("121", 0.0))


def test_build_agents_rejects_bad_input() -> None:
    with pytest.raises(DataTableError):
        build_agents({"data": {}})


def test_load_source_local_and_remote(tmp_path: Path, monkeypatch: MonkeyPatch) -> None:
    path = tmp_path / "data.json"
    path.write_text('{"a": 1}', encoding="utf-8")
    assert load_source(str(path)) == {"a": 1}

    seen: list[str] = []

    def _fake_fetch(url: str, timeout: float = 0.0) -> object:
        seen.append(url)
        return {"remote": True}

    monkeypatch.setattr(databuild, "fetch_json", _fake_fetch)
    assert load_source("https://example.com/data.json") == {"remote": True}
    assert seen == ["https://example.com/data.json"]

    with pytest.raises(DataTableError):
        load_source(str(tmp_path / "missing.json"))


def test_write_tables(tmp_path: Path) -> None:
    written = write_tables(tmp_path / "out", features={"a": {"status": "none"}})

    assert written == [tmp_path / "out" / "features.json"]
    assert json.loads(written[0].read_text(encoding="utf-8")) == {"a": {"status": "none"}}


def test_bundled_tables_are_consistent() -> None:
    tables = load_tables()

    assert set(tables.aliases.values()) <= set(tables.features)
    assert tables.aliases["dialog"] == "dialog-element"
    assert tables.features["web-share"].status == "none"
    assert "chrome" in tables.agents
    with pytest.raises(TypeError):
        tables.aliases["new"] = "x"  # type: ignore[index]


def test_load_tables_from_directory(tmp_path: Path) -> None:
    (tmp_path / "aliases").mkdir()
    (tmp_path / "features.json").write_text(
        json.dumps({"f": {"status": "widely", "minBrowserVersions": {"Chrome": 1}}}),
        encoding="utf-8",
    )
    for name, payload in (("script", {"a": "f"}), ("style", {"a": "g"}), ("markup", {})):
        (tmp_path / "aliases" / f"{name}.json").write_text(json.dumps(payload), encoding="utf-8")
    (tmp_path / "browsers.json").write_text('{"chrome": [["1", 2]]}', encoding="utf-8")

    tables = load_tables(tmp_path)

    assert tables.features["f"].min_browser_versions == {"chrome": "1"}
    assert tables.aliases == {"a": "g"}
    assert tables.agents["chrome"] == (("1", 2.0),)


@pytest.mark.parametrize(
    ("name", "text"),
    [
        ("features.json", '{"f": {"status": "sometimes"}}'),
        ("features.json", "[]"),
        ("browsers.json", '{"chrome": [["1"]]}'),
        ("browsers.json", "{broken"),
    ],
)
def test_load_tables_rejects_malformed(tmp_path: Path, name: str, text: str) -> None:
    (tmp_path / "aliases").mkdir()
    (tmp_path / "features.json").write_text("{}", encoding="utf-8")
    (tmp_path / "browsers.json").write_text("{}", encoding="utf-8")
    for alias_name in ("script", "style", "markup"):
        (tmp_path / "aliases" / f"{alias_name}.json").write_text("{}", encoding="utf-8")
    (tmp_path / name).write_text(text, encoding="utf-8")

    with pytest.raises(DataTableError):
        load_tables(tmp_path)


def test_merge_aliases_last_definition_wins() -> None:
    merged = merge_aliases({"dialog": "one", "a": "x"}, {"dialog": "two"}, {"b": "y"})

    assert merged == {"dialog": "two", "a": "x", "b": "y"}
