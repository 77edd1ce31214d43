from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import List

from ..config import CrawlConfig
from ..utils.logging import setup_logging
from ..utils.loader import load_symbol
from ..adapters.registry import AdapterRegistry
from ..engines.base import ExtractionEngine
from ..errors import CrawlerError
from ..export.base import Exporter
from ..models import BatchReport, SearchHit

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Product page ingredient extractor")
    p.add_argument("--config", type=str, help="Path to config JSON", default=None)
    p.add_argument("--site", type=str, default=None, help="Site adapter name (default from config)")
    p.add_argument("--engine", type=str, default=None, help="Engine dotted path (module:ClassName)")
    p.add_argument("--extra-adapters", type=str, default=None,
                   help="Comma-separated dotted paths for additional adapters")
    p.add_argument("--headed", action="store_true", help="Show the browser window")
    p.add_argument("--log-level", type=str, default=None, help="Log level (DEBUG, INFO, WARNING, ERROR)")

    sub = p.add_subparsers(dest="command", required=True)

    ex = sub.add_parser("extract", help="Extract products by site id (e.g. goodsNo)")
    ex.add_argument("ids", nargs="+", help="Product ids, processed one at a time")
    ex.add_argument("--output", type=str, default=None, help="Output file path")
    ex.add_argument("--exporter", type=str, default=None, help="Exporter dotted path (module:ClassName)")
    ex.add_argument("--delay", type=float, default=None, help="Seconds to pause between items")

    se = sub.add_parser("search", help="List products matching a query (first page only)")
    se.add_argument("query", help="Search text")
    return p


def _load_config(args: argparse.Namespace) -> CrawlConfig:
    if args.config:
        cfg = CrawlConfig.from_file(args.config)
    else:
        cfg = CrawlConfig.from_env()

    if args.site:
        cfg.site = args.site
    if args.engine:
        cfg.engine = args.engine
    if args.headed:
        cfg.headless = False
    if getattr(args, "output", None):
        cfg.output_path = args.output
    if getattr(args, "exporter", None):
        cfg.exporter = args.exporter
    if getattr(args, "delay", None) is not None:
        cfg.batch_delay = args.delay

    cfg.validate()
    return cfg


def _build_registry(args: argparse.Namespace) -> AdapterRegistry:
    registry = AdapterRegistry()
    registry.discover_entry_points()
    # Allow runtime registration of additional adapters
    dotted_paths = [a.strip() for a in (args.extra_adapters or "").split(",") if a.strip()]
    for dotted in dotted_paths:
        try:
            adapter_cls = load_symbol(dotted)
            registry.register(adapter_cls())
        except Exception as exc:
            logger.warning("Failed to load adapter %s: %r", dotted, exc)
    return registry


async def _run_extract(engine: ExtractionEngine, ids: List[str]) -> BatchReport:
    async with engine:
        return await engine.extract_many(ids)


async def _run_search(engine: ExtractionEngine, query: str) -> List[SearchHit]:
    async with engine:
        return await engine.search(query)


def run_cli(argv: List[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        cfg = _load_config(args)
        # Dynamic engine loading so upgrades don't require code edits.
        engine_cls = load_symbol(cfg.engine)
        engine: ExtractionEngine = engine_cls(cfg, registry=_build_registry(args))
    except (ValueError, OSError, KeyError, ImportError) as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    if args.command == "search":
        try:
            hits = asyncio.run(_run_search(engine, args.query))
        except CrawlerError as exc:
            logger.error("Search failed: %s", exc)
            return 1
        json.dump([h.to_dict() for h in hits], sys.stdout, indent=2, ensure_ascii=False)
        sys.stdout.write("\n")
        return 0

    report = asyncio.run(_run_extract(engine, args.ids))
    exporter: Exporter = load_symbol(cfg.exporter)()
    exporter.export(report, cfg.output_path)

    logger.info("Extracted: %s | Failed: %s | Output: %s",
                len(report.success),
                len(report.failed),
                cfg.output_path)
    # A lone id that failed is a failed run; in a batch, failures are in the report.
    if report.total == 1 and report.failed:
        return 1
    return 0
