from __future__ import annotations

import json

import pytest

from ingredient_crawler.config import CrawlConfig, migrate_config
from ingredient_crawler.version import CONFIG_SCHEMA_VERSION


def test_defaults_validate(tmp_path) -> None:
    cfg = CrawlConfig(output_path=str(tmp_path / "nested" / "out.json"))
    cfg.validate()
    assert (tmp_path / "nested").is_dir()
    assert cfg.to_dict()["scroll_delays"] == [2.0, 1.0]


@pytest.mark.parametrize(
    "field, value",
    [("table_timeout", 0), ("batch_delay", -1), ("retries", -1), ("shape_min_commas", -1), ("site", ""),
     ("search_wait_timeout", 0), ("scroll_delays", (1.0, -1.0))],
)
def test_validate_rejects(tmp_path, field: str, value) -> None:
    cfg = CrawlConfig(output_path=str(tmp_path / "out.json"))
    setattr(cfg, field, value)
    with pytest.raises(ValueError):
        cfg.validate()


def test_from_env(monkeypatch) -> None:
    monkeypatch.setenv("INGREDIENT_CRAWLER_TABLE_TIMEOUT", "4.5")
    monkeypatch.setenv("INGREDIENT_CRAWLER_HEADLESS", "false")
    monkeypatch.setenv("INGREDIENT_CRAWLER_BATCH_DELAY", "0")
    monkeypatch.setenv("PUPPETEER_EXECUTABLE_PATH", "/usr/bin/chromium")

    cfg = CrawlConfig.from_env()

    assert cfg.table_timeout == 4.5
    assert cfg.headless is False
    assert cfg.batch_delay == 0
    assert cfg.executable_path == "/usr/bin/chromium"
    assert cfg.site == "oliveyoung"


def test_from_env_tuning_knobs(monkeypatch) -> None:
    monkeypatch.setenv("INGREDIENT_CRAWLER_SEARCH_WAIT_TIMEOUT", "2.5")
    monkeypatch.setenv("INGREDIENT_CRAWLER_SCROLL_DELAYS", "1.5,0")
    monkeypatch.setenv("INGREDIENT_CRAWLER_LABELLED_MIN_LENGTH", "5")
    monkeypatch.setenv("INGREDIENT_CRAWLER_SHAPE_MIN_LENGTH", "60")
    monkeypatch.setenv("INGREDIENT_CRAWLER_SHAPE_MIN_COMMAS", "3")

    cfg = CrawlConfig.from_env()

    assert cfg.search_wait_timeout == 2.5
    assert cfg.scroll_delays == (1.5, 0.0)
    assert (cfg.labelled_min_length, cfg.shape_min_length, cfg.shape_min_commas) == (5, 60, 3)


def test_from_env_defaults_round_trip_scroll_delays(monkeypatch) -> None:
    monkeypatch.delenv("INGREDIENT_CRAWLER_SCROLL_DELAYS", raising=False)
    assert CrawlConfig.from_env().scroll_delays == (2.0, 1.0)


def test_from_file_values_pass_through_unchanged(tmp_path) -> None:
    path = tmp_path / "cfg.json"
    path.write_text(
        json.dumps({"navigation_timeout": 45, "scroll_delays": [1, 0.5]}),
        encoding="utf-8",
    )

    cfg = CrawlConfig.from_file(path)

    assert cfg.schema_version == CONFIG_SCHEMA_VERSION
    # Durations are seconds in every schema version; nothing is rescaled.
    assert cfg.navigation_timeout == 45
    assert cfg.scroll_delays == (1, 0.5)


def test_from_file_rejects_unknown_keys(tmp_path) -> None:
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({"max_depth": 3}), encoding="utf-8")
    with pytest.raises(ValueError, match="max_depth"):
        CrawlConfig.from_file(path)


def test_migrate_current_is_noop() -> None:
    raw = {"schema_version": CONFIG_SCHEMA_VERSION, "table_timeout": 5.0}
    assert migrate_config(raw) == raw
