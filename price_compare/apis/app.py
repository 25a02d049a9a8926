from __future__ import annotations

from typing import Any, Callable, Dict, List, Literal, Optional
import logging
import math

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from ..adapters.base import ComparisonResult
from ..config import CompareConfig
from ..engines.base import ComparisonEngine
from ..engines.factory import build_engine
from ..utils.cache import ResultCache, cache_key
from ..utils.ratelimit import RequestGate
from ..version import __version__

logger = logging.getLogger(__name__)

EngineFactory = Callable[[], ComparisonEngine]


class ComparisonResultModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    retailer: str
    title: Optional[str] = None
    price: int
    shipping: int
    total_cost: int = Field(alias="totalCost")
    available: bool
    link: str
    link_text: str = Field(alias="linkText")
    delivery_days: Optional[int] = Field(default=None, alias="deliveryDays")


class CompareResponse(BaseModel):
    source: Literal["cache", "live"]
    data: List[ComparisonResultModel]


# ---- Dependencies -----------------------------------------------------------


def get_config(request: Request) -> CompareConfig:
    return request.app.state.config


def get_cache(request: Request) -> ResultCache[ComparisonResult]:
    return request.app.state.cache


def get_engine_factory(request: Request) -> EngineFactory:
    return request.app.state.engine_factory


def client_identity(request: Request, config: CompareConfig = Depends(get_config)) -> str:
    if config.trust_forwarded_for:
        forwarded = request.headers.get("X-Forwarded-For", "")
        if forwarded:
            return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def enforce_rate_limit(request: Request, identity: str = Depends(client_identity)) -> None:
    gate: RequestGate = request.app.state.gate
    if not gate.admit(identity):
        retry_after = math.ceil(gate.retry_after(identity)) or 1
        logger.info("Rate limit hit for %s", identity)
        raise HTTPException(
            status_code=429,
            detail="Too many requests",
            headers={"Retry-After": str(retry_after)},
        )


# ---- Routes -----------------------------------------------------------------

router = APIRouter()


@router.get("/health")
async def health() -> Dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/api/compare",
    response_model=CompareResponse,
    dependencies=[Depends(enforce_rate_limit)],
)
async def compare(
    q: Optional[str] = Query(default=None),
    cache: ResultCache[ComparisonResult] = Depends(get_cache),
    engine_factory: EngineFactory = Depends(get_engine_factory),
) -> Any:
    query = (q or "").strip()
    if not query:
        return JSONResponse(status_code=400, content={"error": "Missing q param"})

    key = cache_key(query)
    cached = cache.get(key)
    if cached is not None:
        logger.debug("Cache hit for %r", query)
        return {"source": "cache", "data": [r.to_dict() for r in cached]}

    try:
        engine = engine_factory()
        results = await engine.compare(query)
    except Exception:
        logger.exception("compare failed for %r", query)
        return JSONResponse(status_code=500, content={"error": "internal"})

    snapshot = cache.set(key, results)
    return {"source": "live", "data": [r.to_dict() for r in snapshot]}


# ---- Application ------------------------------------------------------------


def create_app(
    config: CompareConfig | None = None,
    *,
    engine_factory: EngineFactory | None = None,
    cache: ResultCache[ComparisonResult] | None = None,
    gate: RequestGate | None = None,
) -> FastAPI:
    """
    Build the API with its process-scoped state: config, result cache, request
    gate and the factory that makes one engine per live comparison.
    """
    cfg = config or CompareConfig.from_env()
    cfg.validate()

    app = FastAPI(title="price_compare API", version=__version__)
    app.state.config = cfg
    app.state.cache = cache if cache is not None else ResultCache(ttl=cfg.cache_ttl)
    app.state.gate = gate if gate is not None else RequestGate(cfg.rate_limit_max, cfg.rate_limit_window)
    app.state.engine_factory = engine_factory or (lambda: build_engine(cfg))
    app.include_router(router)
    return app

