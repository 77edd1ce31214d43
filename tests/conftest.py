"""Shared fixtures: static HTML documents and a delay-free extractor."""

from __future__ import annotations

import pytest

from ingredient_crawler.adapters.oliveyoung import OliveYoungAdapter
from ingredient_crawler.config import CrawlConfig
from ingredient_crawler.documents.static import StaticDocument
from ingredient_crawler.extraction.pipeline import Extractor

PRODUCT_URL = "https://www.oliveyoung.co.kr/store/goods/getGoodsDetail.do?goodsNo=A000000184228"

# 17 items, 16 commas, >100 characters
LONG_LIST = ", ".join(
    [
        "정제수", "글리세린", "부틸렌글라이콜", "나이아신아마이드", "판테놀", "알란토인",
        "카보머", "트로메타민", "아데노신", "토코페롤", "향료", "세라마이드엔피",
        "히알루론산", "소듐하이알루로네이트", "베타인", "스쿠알란", "마데카소사이드",
    ]
)


def page(body: str, title: str = "") -> str:
    return f"<html><head><title>{title}</title></head><body>{body}</body></html>"


def row(label: str, value: str, scope: bool = True) -> str:
    attr = ' scope="row"' if scope else ""
    return f"<tr><th{attr}>{label}</th><td>{value}</td></tr>"


@pytest.fixture
def make_doc():
    def _make(body: str, title: str = "", url: str = PRODUCT_URL) -> StaticDocument:
        return StaticDocument(page(body, title), url=url)
    return _make


@pytest.fixture
def adapter() -> OliveYoungAdapter:
    return OliveYoungAdapter()


@pytest.fixture
def extractor(adapter: OliveYoungAdapter) -> Extractor:
    return Extractor(adapter, table_timeout=0.1, post_reveal_delay=0)


@pytest.fixture
def fast_config(tmp_path) -> CrawlConfig:
    return CrawlConfig(
        output_path=str(tmp_path / "out" / "products.json"),
        settle_delay=0,
        scroll_delays=(0, 0),
        post_reveal_delay=0,
        batch_delay=0,
        table_timeout=0.1,
    )
