from __future__ import annotations

import json

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from ingredient_crawler.adapters.oliveyoung import OliveYoungAdapter
from ingredient_crawler.engines.simple_engine import SimpleEngine
from ingredient_crawler.errors import CrawlerError, NavigationError
from ingredient_crawler.export.json_exporter import JSONExporter

from conftest import page, row
from fakes import FakeEngine

ADAPTER = OliveYoungAdapter()
GOOD = ADAPTER.product_url("A0001")
DETAIL = page(
    '<div class="prd_brand">닥터지</div>'
    '<p class="prd_name">레드 블레미쉬 클리어 수딩 크림</p>'
    "<table>" + row("모든 성분", "정제수, 글리세린, 병풀추출물, 1,2-헥산다이올") + "</table>"
)
SEARCH = page(
    '<div class="prd_unit"><div class="prd_info">'
    '<a href="/store/goods/getGoodsDetail.do?goodsNo=A0001"><span class="tx_brand">닥터지</span></a>'
    "</div></div>"
)


@pytest.fixture
def engine(fast_config) -> FakeEngine:
    return FakeEngine(fast_config, pages={GOOD: DETAIL, ADAPTER.search_url("크림"): SEARCH})


async def test_extract(engine: FakeEngine) -> None:
    product = await engine.extract("A0001")

    assert product.external_id == "A0001"
    assert product.source_url == GOOD
    assert product.brand == "닥터지"
    assert product.ingredients == ("정제수", "글리세린", "병풀추출물", "1,2-헥산다이올")


async def test_navigation_failure_propagates(engine: FakeEngine) -> None:
    with pytest.raises(NavigationError) as info:
        await engine.extract("MISSING")
    assert info.value.url == ADAPTER.product_url("MISSING")


async def test_batch_continues_after_failure(engine: FakeEngine) -> None:
    report = await engine.extract_many(["MISSING", "A0001"])

    assert [p.external_id for p in report.success] == ["A0001"]
    assert [f.external_id for f in report.failed] == ["MISSING"]
    assert "Could not load" in report.failed[0].error
    assert report.total == 2
    # Strictly one page at a time, in input order.
    assert engine.opened == [ADAPTER.product_url("MISSING"), GOOD]


async def test_batch_does_not_swallow_programming_errors(engine: FakeEngine, monkeypatch) -> None:
    async def boom(*args, **kwargs):
        raise RuntimeError("bug")

    monkeypatch.setattr(engine.extractor, "extract", boom)
    with pytest.raises(RuntimeError):
        await engine.extract_many(["A0001"])


async def test_batch_pacing(engine: FakeEngine, monkeypatch) -> None:
    slept = []

    async def fake_sleep(seconds: float) -> None:
        slept.append(seconds)

    monkeypatch.setattr("ingredient_crawler.engines.base.asyncio.sleep", fake_sleep)
    engine.config.batch_delay = 1.0
    await engine.extract_many(["A0001", "MISSING", "A0001"])

    assert slept == [1.0, 1.0]


async def test_search(engine: FakeEngine) -> None:
    hits = await engine.search("크림")
    assert [h.external_id for h in hits] == ["A0001"]
    assert hits[0].brand == "닥터지"


async def test_engine_context_closes(fast_config) -> None:
    async with FakeEngine(fast_config, pages={}) as engine:
        pass
    assert engine.closed


def test_unknown_site_rejected(fast_config) -> None:
    fast_config.site = "nowhere"
    with pytest.raises(KeyError):
        FakeEngine(fast_config)


def test_errors_share_base() -> None:
    assert issubclass(NavigationError, CrawlerError)


async def test_simple_engine_reports_unreachable_page(fast_config, monkeypatch) -> None:
    async def no_body(*args, **kwargs):
        return None

    monkeypatch.setattr("ingredient_crawler.engines.simple_engine.fetch_text", no_body)
    engine = SimpleEngine(fast_config)
    try:
        with pytest.raises(NavigationError):
            await engine.extract("A0001")
    finally:
        await engine.close()


async def test_simple_engine_extracts_static_page(fast_config, monkeypatch) -> None:
    async def body(session, url, **kwargs):
        return DETAIL

    monkeypatch.setattr("ingredient_crawler.engines.simple_engine.fetch_text", body)
    async with SimpleEngine(fast_config) as engine:
        product = await engine.extract("A0001")
    assert product.name == "레드 블레미쉬 클리어 수딩 크림"


async def test_simple_engine_survives_mislabelled_charset(fast_config) -> None:
    async def detail(request: web.Request) -> web.Response:
        if request.query["goodsNo"] == "BROKEN":
            # Declared UTF-8, but the bytes are not.
            return web.Response(body=b"<html><body>\xff\xfe\xfa</body></html>",
                                content_type="text/html", charset="utf-8")
        return web.Response(text=DETAIL, content_type="text/html", charset="utf-8")

    app = web.Application()
    app.router.add_get("/store/goods/getGoodsDetail.do", detail)
    server = TestServer(app)
    await server.start_server()
    try:
        adapter = OliveYoungAdapter()
        adapter.base_url = f"http://{server.host}:{server.port}"
        async with SimpleEngine(fast_config, adapter=adapter) as engine:
            report = await engine.extract_many(["BROKEN", "A0001"])
    finally:
        await server.close()

    assert [p.external_id for p in report.success] == ["BROKEN", "A0001"]
    assert report.failed == []
    assert report.success[0].ingredients == ()
    assert report.success[1].ingredients[0] == "정제수"


async def test_json_export(engine: FakeEngine, tmp_path) -> None:
    report = await engine.extract_many(["A0001", "MISSING"])
    path = tmp_path / "out" / "products.json"

    JSONExporter().export(report, str(path))

    text = path.read_text(encoding="utf-8")
    assert "정제수" in text
    data = json.loads(text)
    assert data["success"][0]["ingredients"][0] == "정제수"
    assert data["failed"][0]["external_id"] == "MISSING"
