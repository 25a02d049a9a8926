from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import List

from ..adapters.base import ComparisonResult
from ..config import CompareConfig
from ..engines.factory import build_engine
from ..export.base import EXPORTERS
from ..utils.logging import setup_logging
from ..utils.loader import load_symbol

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Compare retailer prices for a product query")
    p.add_argument("query", nargs="*", help="Search query (words are joined with spaces)")
    p.add_argument("--config", type=str, help="Path to config JSON", default=None)
    p.add_argument("--engine", type=str, default=None, help="Engine dotted path (module:ClassName)")
    p.add_argument("--disable", type=str, default=None,
                   help="Comma-separated retailer names to skip, e.g. 'Official Store'")
    p.add_argument("--output", type=str, default=None, help="Write results to this file instead of stdout")
    p.add_argument("--format", choices=sorted(EXPORTERS), default="json", help="Output file format")
    p.add_argument("--log-level", type=str, default=None, help="Log level (DEBUG, INFO, WARNING, ERROR)")
    p.add_argument("--serve", action="store_true", help="Run REST API server instead of a one-shot comparison")
    p.add_argument("--host", type=str, default="127.0.0.1", help="API host (when --serve)")
    p.add_argument("--port", type=int, default=8000, help="API port (when --serve)")
    p.add_argument("--reload", action="store_true", help="Auto-reload on code changes (when --serve)")
    return p


def _load_config(args: argparse.Namespace) -> CompareConfig:
    if args.config:
        cfg = CompareConfig.from_file(args.config)
    else:
        cfg = CompareConfig.from_env()

    if args.engine:
        cfg.engine = args.engine
    if args.disable:
        cfg.disabled_adapters = [n.strip() for n in args.disable.split(",") if n.strip()]
    if args.output:
        cfg.output_path = args.output

    cfg.validate()
    return cfg


def run_server(host: str, port: int, reload: bool = False) -> None:
    import uvicorn

    # The app is built per server process so config is read at startup, not at import.
    uvicorn.run("price_compare.apis.app:create_app", factory=True, host=host, port=port, reload=reload)


def run_cli(argv: List[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    if args.serve:
        run_server(args.host, args.port, args.reload)
        return 0

    query = " ".join(args.query).strip()
    if not query:
        parser.error("a search query is required unless --serve is given")

    cfg = _load_config(args)
    engine = build_engine(cfg)

    async def _run() -> List[ComparisonResult]:
        return await engine.compare(query)

    results = asyncio.run(_run())

    if args.output:
        cfg.ensure_output_dir()
        exporter = load_symbol(EXPORTERS[args.format])()
        exporter.export(query, results, cfg.output_path)
        logger.info("Offers: %s | Output: %s", len(results), cfg.output_path)
    else:
        payload = {"query": query, "data": [r.to_dict() for r in results]}
        json.dump(payload, sys.stdout, indent=2, ensure_ascii=False)
        sys.stdout.write("\n")
    return 0
