from __future__ import annotations

import json

import pytest

from ingredient_crawler.adapters.oliveyoung import OliveYoungAdapter
from ingredient_crawler.ui.cli import _load_config, build_arg_parser, run_cli

from conftest import page, row
from fakes import FakeEngine

ADAPTER = OliveYoungAdapter()
DETAIL = page("<table>" + row("모든 성분", "정제수, 글리세린, 부틸렌글라이콜, 판테놀") + "</table>")


@pytest.fixture
def quiet_env(monkeypatch):
    for name, value in {
        "INGREDIENT_CRAWLER_POST_REVEAL_DELAY": "0",
        "INGREDIENT_CRAWLER_SETTLE_DELAY": "0",
        "INGREDIENT_CRAWLER_TABLE_TIMEOUT": "0.1",
    }.items():
        monkeypatch.setenv(name, value)
    monkeypatch.setattr(FakeEngine, "PAGES", {ADAPTER.product_url("A0001"): DETAIL})


def test_parser_extract_options() -> None:
    args = build_arg_parser().parse_args(["--headed", "extract", "A1", "A2", "--delay", "0"])
    assert args.command == "extract"
    assert args.ids == ["A1", "A2"]
    assert args.delay == 0


def test_load_config_applies_overrides(tmp_path) -> None:
    out = str(tmp_path / "x.json")
    args = build_arg_parser().parse_args(["--headed", "extract", "A1", "--output", out, "--delay", "0.5"])
    cfg = _load_config(args)
    assert cfg.headless is False
    assert cfg.output_path == out
    assert cfg.batch_delay == 0.5


def test_extract_command_writes_report(quiet_env, tmp_path) -> None:
    out = tmp_path / "products.json"
    code = run_cli(
        ["--engine", "fakes:FakeEngine", "extract", "A0001", "MISSING", "--output", str(out), "--delay", "0"]
    )

    assert code == 0
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["success"][0]["ingredients"] == ["정제수", "글리세린", "부틸렌글라이콜", "판테놀"]
    assert data["failed"][0]["external_id"] == "MISSING"


def test_single_failed_extract_exits_nonzero(quiet_env, tmp_path) -> None:
    out = tmp_path / "products.json"
    code = run_cli(["--engine", "fakes:FakeEngine", "extract", "MISSING", "--output", str(out)])
    assert code == 1


def test_invalid_config_exits_2(quiet_env, monkeypatch) -> None:
    monkeypatch.setenv("INGREDIENT_CRAWLER_TABLE_TIMEOUT", "0")
    assert run_cli(["--engine", "fakes:FakeEngine", "extract", "A0001"]) == 2


def test_unknown_site_exits_2(quiet_env) -> None:
    assert run_cli(["--site", "nowhere", "--engine", "fakes:FakeEngine", "search", "크림"]) == 2


def test_unloadable_engine_exits_2(quiet_env) -> None:
    assert run_cli(["--engine", "fakes:NoSuchEngine", "extract", "A0001"]) == 2


def test_search_navigation_failure_exits_1(quiet_env, capsys) -> None:
    # Only the product page is served; the search page is not.
    assert run_cli(["--engine", "fakes:FakeEngine", "search", "크림"]) == 1
    assert capsys.readouterr().out == ""
