from __future__ import annotations

import re
from typing import List, Optional
from urllib.parse import quote, urljoin

from bs4 import BeautifulSoup

from .base import domain_of
from ..extraction.fields import FieldLocator, FieldRules, brand_check, name_check
from ..extraction.locator import (
    LABELLED_MIN_LENGTH,
    SHAPE_MIN_COMMAS,
    SHAPE_MIN_LENGTH,
    ContentShapeStrategy,
    ExactScopeStrategy,
    LocatorStrategy,
    RelaxedLabelStrategy,
)
from ..models import SearchHit

_GOODS_NO_RE = re.compile(r"goodsNo=([A-Z0-9]+)")


class OliveYoungAdapter:
    """Olive Young (oliveyoung.co.kr) product and search pages."""

    name = "oliveyoung"
    domains = ["www.oliveyoung.co.kr", "oliveyoung.co.kr"]
    base_url = "https://www.oliveyoung.co.kr"

    field_rules = FieldRules(
        brand=[
            FieldLocator(".prd_brand a", brand_check(("공유",))),
            FieldLocator(".prd_brand", brand_check(("공유",))),
            FieldLocator('[class*="brand"] a', brand_check(("공유",))),
            FieldLocator('[class*="brand"]', brand_check(("공유",))),
        ],
        name=[
            FieldLocator("p.prd_name", name_check),
            FieldLocator(".prd_name", name_check),
            FieldLocator('[class*="prd_name"]', name_check),
            FieldLocator('[class*="goods_name"]', name_check),
        ],
        image=[".prd_detail_img img", "#mainImg", ".thumb_img img"],
        image_domain="oliveyoung",
        title_separator="|",
    )

    # "상품정보 제공고시": the mandatory product information notice
    reveal_labels = ("상품정보", "제공고시")
    table_selector = 'th[scope="row"]'
    search_selector = ".prd_info"

    # "화장품법에 따라 기재해야 하는 모든 성분": the statutory ingredient row label
    ingredient_labels = ("화장품법", "모든 성분")
    bare_labels = ("전성분",)
    # Purified water and glycerin open most cosmetic ingredient lists.
    content_markers = ("정제수", "글리세린")

    disclosure_markers = ("화장품법",)
    must_list_markers = ("기재해야",)
    not_applicable_markers = ("해당없음",)

    search_limit = 20

    def matches(self, url: str) -> bool:
        return domain_of(url).lower().endswith("oliveyoung.co.kr")

    def product_url(self, external_id: str) -> str:
        return f"{self.base_url}/store/goods/getGoodsDetail.do?goodsNo={quote(external_id)}"

    def search_url(self, query: str) -> str:
        return f"{self.base_url}/store/search/getSearchMain.do?query={quote(query)}"

    def external_id(self, url: str) -> Optional[str]:
        match = _GOODS_NO_RE.search(url or "")
        return match.group(1) if match else None

    def strategies(
        self,
        *,
        labelled_min_length: int = LABELLED_MIN_LENGTH,
        shape_min_length: int = SHAPE_MIN_LENGTH,
        shape_min_commas: int = SHAPE_MIN_COMMAS,
    ) -> List[LocatorStrategy]:
        return [
            ExactScopeStrategy(self.ingredient_labels, min_length=labelled_min_length),
            RelaxedLabelStrategy(
                self.ingredient_labels,
                exact_labels=self.bare_labels,
                min_length=labelled_min_length,
            ),
            ContentShapeStrategy(
                self.content_markers,
                min_length=shape_min_length,
                min_commas=shape_min_commas,
            ),
        ]

    # ---- Search listing -----------------------------------------------------

    def parse_search(self, html: str, base_url: str) -> List[SearchHit]:
        """First page of results only; cards without a goodsNo are skipped."""
        soup = BeautifulSoup(html, "html.parser")
        hits: List[SearchHit] = []
        for info in soup.select(".prd_info")[: self.search_limit]:
            anchor = info.select_one("a")
            href = urljoin(base_url, anchor.get("href", "")) if anchor else ""
            goods_no = self.external_id(href)
            if not goods_no:
                continue
            unit = info.find_parent(class_="prd_unit")
            image = unit.select_one(".thumb img") if unit else None
            src = image.get("src") if image else None
            hits.append(
                SearchHit(
                    external_id=goods_no,
                    url=href,
                    brand=self._text(info.select_one(".tx_brand")),
                    name=self._text(info.select_one(".tx_name")),
                    price=self._text(info.select_one(".tx_cur em")),
                    image_url=urljoin(base_url, src) if src else "",
                )
            )
        return hits

    def _text(self, node) -> str:
        if not node:
            return ""
        return node.get_text().strip()
