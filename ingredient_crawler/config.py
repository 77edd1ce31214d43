from __future__ import annotations

from dataclasses import dataclass, field, asdict, fields
from typing import Optional, Dict, Any
from pathlib import Path
import os
import json

from .version import CONFIG_SCHEMA_VERSION

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


@dataclass
class CrawlConfig:
    """
    Canonical configuration object passed throughout the system.
    Keep it dataclass-only (no heavy deps) to stay upgrade-friendly.
    All durations are in seconds.
    """
    schema_version: int = CONFIG_SCHEMA_VERSION
    # Adapter name from the registry
    site: str = "oliveyoung"
    # Dotted paths for engine/exporter to allow runtime swapping without code changes.
    engine: str = "ingredient_crawler.engines.browser_engine:BrowserEngine"
    exporter: str = "ingredient_crawler.export.json_exporter:JSONExporter"
    output_path: str = "output/products.json"

    # ---- Session ----
    user_agent: str = DEFAULT_USER_AGENT
    headless: bool = True
    executable_path: Optional[str] = None
    viewport: Dict[str, int] = field(default_factory=lambda: {"width": 1920, "height": 1080})
    request_timeout: float = 15.0
    retries: int = 2

    # ---- Suspension points ----
    navigation_timeout: float = 60.0
    search_timeout: float = 30.0
    search_wait_timeout: float = 10.0
    table_timeout: float = 10.0
    settle_delay: float = 3.0
    scroll_delays: tuple = (2.0, 1.0)
    post_reveal_delay: float = 2.0
    # Pause between batch items so the site does not rate-limit us.
    batch_delay: float = 1.0

    # ---- Ingredient locator thresholds (tuned against live markup) ----
    labelled_min_length: int = 20
    shape_min_length: int = 100
    shape_min_commas: int = 5

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["scroll_delays"] = list(self.scroll_delays)
        return data

    # ---------- Loaders ----------

    @classmethod
    def from_env(cls) -> "CrawlConfig":
        """
        Build config from environment variables (all optional).
        """
        defaults = cls()

        def _get(name: str, default: Any) -> str:
            return os.getenv(f"INGREDIENT_CRAWLER_{name}", str(default))

        def _floats(value: str) -> tuple:
            return tuple(float(v) for v in value.split(",") if v.strip())

        return cls(
            site=_get("SITE", defaults.site),
            engine=_get("ENGINE", defaults.engine),
            exporter=_get("EXPORTER", defaults.exporter),
            output_path=_get("OUTPUT_PATH", defaults.output_path),
            user_agent=_get("USER_AGENT", defaults.user_agent),
            headless=_get("HEADLESS", "true").lower() not in ("0", "false", "no"),
            # Same override name the browser tooling already honours in containers.
            executable_path=os.getenv("PUPPETEER_EXECUTABLE_PATH")
            or os.getenv("INGREDIENT_CRAWLER_EXECUTABLE_PATH")
            or None,
            request_timeout=float(_get("REQUEST_TIMEOUT", defaults.request_timeout)),
            retries=int(_get("RETRIES", defaults.retries)),
            navigation_timeout=float(_get("NAVIGATION_TIMEOUT", defaults.navigation_timeout)),
            search_timeout=float(_get("SEARCH_TIMEOUT", defaults.search_timeout)),
            table_timeout=float(_get("TABLE_TIMEOUT", defaults.table_timeout)),
            settle_delay=float(_get("SETTLE_DELAY", defaults.settle_delay)),
            post_reveal_delay=float(_get("POST_REVEAL_DELAY", defaults.post_reveal_delay)),
            batch_delay=float(_get("BATCH_DELAY", defaults.batch_delay)),
            search_wait_timeout=float(_get("SEARCH_WAIT_TIMEOUT", defaults.search_wait_timeout)),
            scroll_delays=_floats(_get("SCROLL_DELAYS", ",".join(str(d) for d in defaults.scroll_delays))),
            labelled_min_length=int(_get("LABELLED_MIN_LENGTH", defaults.labelled_min_length)),
            shape_min_length=int(_get("SHAPE_MIN_LENGTH", defaults.shape_min_length)),
            shape_min_commas=int(_get("SHAPE_MIN_COMMAS", defaults.shape_min_commas)),
        )

    @classmethod
    def from_file(cls, path: str | os.PathLike[str]) -> "CrawlConfig":
        """
        Load configuration from a JSON file. Supports schema migration for future versions.
        """
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        data = migrate_config(data)
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
        if "scroll_delays" in data:
            data["scroll_delays"] = tuple(data["scroll_delays"])
        return cls(**data)

    # ---------- Validation ----------

    def validate(self) -> None:
        if not self.site:
            raise ValueError("site cannot be empty")
        for name in ("navigation_timeout", "search_timeout", "search_wait_timeout", "table_timeout", "request_timeout"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be > 0")
        for name in ("settle_delay", "post_reveal_delay", "batch_delay"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0")
        if any(d < 0 for d in self.scroll_delays):
            raise ValueError("scroll_delays must be >= 0")
        if self.retries < 0:
            raise ValueError("retries must be >= 0")
        if self.labelled_min_length < 0 or self.shape_min_length < 0 or self.shape_min_commas < 0:
            raise ValueError("locator thresholds must be >= 0")
        # Validate output path parent exists or is creatable
        parent = Path(self.output_path).parent
        parent.mkdir(parents=True, exist_ok=True)


def migrate_config(raw: Dict[str, Any]) -> Dict[str, Any]:
    """
    Migrate config dict to the latest schema version.
    Keep this pure and additive. Add migrations here as you bump schema.
    """
    raw = dict(raw)
    schema = raw.get("schema_version", 1)

    # Example placeholder for future migrations:
    # if schema < 2:
    #     raw["schema_version"] = 2
    #     # Map/rename old fields here

    # Ensure a schema_version is present
    raw.setdefault("schema_version", CONFIG_SCHEMA_VERSION)
    return raw
