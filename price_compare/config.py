from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import List, Dict, Any
from pathlib import Path
import os
import json

from .version import CONFIG_SCHEMA_VERSION

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 Chrome/117.0 Safari/537.36"
)
DEFAULT_ENGINE = "price_compare.engines.sequential_engine:SequentialCompareEngine"
DEFAULT_BROWSER_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]


@dataclass
class CompareConfig:
    """
    Canonical configuration object passed throughout the system.
    Keep it dataclass-only (no heavy deps) so the API, CLI and engines share it.
    """
    schema_version: int = CONFIG_SCHEMA_VERSION
    # Browser page settings applied to every adapter page.
    user_agent: str = DEFAULT_USER_AGENT
    viewport_width: int = 1200
    viewport_height: int = 800
    navigation_timeout: float = 30.0
    headless: bool = True
    browser_args: List[str] = field(default_factory=lambda: list(DEFAULT_BROWSER_ARGS))
    # Result cache and request gate.
    cache_ttl: float = 30 * 60
    rate_limit_max: int = 30
    rate_limit_window: float = 60.0
    trust_forwarded_for: bool = False
    # Dotted path for the engine to allow runtime swapping without code changes.
    engine: str = DEFAULT_ENGINE
    # Only used by engines that fan out adapters.
    max_concurrency: int = 5
    adapter_timeout: float = 45.0
    # Extra adapters (dotted class paths) to register at startup
    extra_adapters: List[str] = field(default_factory=list)
    # Adapter names to leave out of the default set, e.g. ["Official Store"]
    disabled_adapters: List[str] = field(default_factory=list)
    # Where the CLI writes results when asked to export
    output_path: str = "output/comparison.json"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    # ---------- Loaders ----------

    @classmethod
    def from_env(cls) -> "CompareConfig":
        """
        Build config from environment variables (all optional).
        """
        def _get(name: str, default: str) -> str:
            return os.getenv(name, default)

        def _list(name: str) -> List[str]:
            return [v.strip() for v in _get(name, "").split(",") if v.strip()]

        def _flag(name: str, default: bool) -> bool:
            raw = os.getenv(name)
            if raw is None:
                return default
            return raw.strip().lower() not in {"0", "false", "no", "off", ""}

        browser_args = _list("PRICE_COMPARE_BROWSER_ARGS") or list(DEFAULT_BROWSER_ARGS)

        return cls(
            user_agent=_get("PRICE_COMPARE_USER_AGENT", DEFAULT_USER_AGENT),
            viewport_width=int(_get("PRICE_COMPARE_VIEWPORT_WIDTH", "1200")),
            viewport_height=int(_get("PRICE_COMPARE_VIEWPORT_HEIGHT", "800")),
            navigation_timeout=float(_get("PRICE_COMPARE_NAVIGATION_TIMEOUT", "30.0")),
            headless=_flag("PRICE_COMPARE_HEADLESS", True),
            browser_args=browser_args,
            cache_ttl=float(_get("PRICE_COMPARE_CACHE_TTL", "1800")),
            rate_limit_max=int(_get("PRICE_COMPARE_RATE_LIMIT_MAX", "30")),
            rate_limit_window=float(_get("PRICE_COMPARE_RATE_LIMIT_WINDOW", "60")),
            trust_forwarded_for=_flag("PRICE_COMPARE_TRUST_FORWARDED_FOR", False),
            engine=_get("PRICE_COMPARE_ENGINE", DEFAULT_ENGINE),
            max_concurrency=int(_get("PRICE_COMPARE_MAX_CONCURRENCY", "5")),
            adapter_timeout=float(_get("PRICE_COMPARE_ADAPTER_TIMEOUT", "45.0")),
            extra_adapters=_list("PRICE_COMPARE_EXTRA_ADAPTERS"),
            disabled_adapters=_list("PRICE_COMPARE_DISABLED_ADAPTERS"),
            output_path=_get("PRICE_COMPARE_OUTPUT_PATH", "output/comparison.json"),
        )

    @classmethod
    def from_file(cls, path: str | os.PathLike[str]) -> "CompareConfig":
        """
        Load configuration from a JSON file. Supports schema migration for older versions.
        """
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        data = migrate_config(data)
        return cls(**data)

    # ---------- Validation ----------

    def validate(self) -> None:
        if self.navigation_timeout <= 0:
            raise ValueError("navigation_timeout must be > 0")
        if self.viewport_width <= 0 or self.viewport_height <= 0:
            raise ValueError("viewport dimensions must be > 0")
        if self.cache_ttl <= 0:
            raise ValueError("cache_ttl must be > 0")
        if self.rate_limit_max <= 0:
            raise ValueError("rate_limit_max must be > 0")
        if self.rate_limit_window <= 0:
            raise ValueError("rate_limit_window must be > 0")
        if self.max_concurrency <= 0:
            raise ValueError("max_concurrency must be > 0")
        if self.adapter_timeout <= 0:
            raise ValueError("adapter_timeout must be > 0")

    def ensure_output_dir(self) -> None:
        Path(self.output_path).parent.mkdir(parents=True, exist_ok=True)

    @property
    def viewport(self) -> Dict[str, int]:
        return {"width": self.viewport_width, "height": self.viewport_height}

    @property
    def navigation_timeout_ms(self) -> float:
        # Playwright timeouts are expressed in milliseconds.
        return self.navigation_timeout * 1000


def migrate_config(raw: Dict[str, Any]) -> Dict[str, Any]:
    """
    Migrate config dict to the latest schema version.
    Keep this pure and additive. Add migrations here as you bump schema.
    """
    data = dict(raw)
    schema = data.get("schema_version", 1)

    if schema < 2:
        # v1 called the page navigation budget "request_timeout" and had no cache section.
        if "request_timeout" in data:
            data.setdefault("navigation_timeout", data.pop("request_timeout"))
        data.pop("retries", None)

    data["schema_version"] = CONFIG_SCHEMA_VERSION
    return data
