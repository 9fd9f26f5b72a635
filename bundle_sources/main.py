# bundle_sources/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from bundle_sources.api.http_problem_handlers import register_exception_handlers
from bundle_sources.api.routers.bundle_products import router as bundle_products_router
from bundle_sources.api.routers.metrics import router as metrics_router
from bundle_sources.api.routers.products import router as products_router
from bundle_sources.api.routers.source_items import router as source_items_router
from bundle_sources.api.routers.sources import router as sources_router
from bundle_sources.core.config import get_settings
from bundle_sources.core.logging import setup_logging
from bundle_sources.db.base import init_models
from bundle_sources.db.schema import create_all
from bundle_sources.db.session import close_engines, get_engine
from bundle_sources.obs.metrics import PrometheusMiddleware

logger = logging.getLogger("bundle_sources")


@asynccontextmanager
async def lifespan(_app: FastAPI):
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)
    init_models()
    if settings.AUTO_CREATE_TABLES:
        await create_all(get_engine())
        logger.info("tables ensured (AUTO_CREATE_TABLES=1)")
    logger.info("bundle-sources started: env=%s", settings.ENV)
    try:
        yield
    finally:
        await close_engines()


app = FastAPI(
    title="Bundle Sources",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(PrometheusMiddleware)
register_exception_handlers(app)

# ===========================
#          挂载路由
# ===========================
# 目录：source / 商品 / 组合品
app.include_router(sources_router)
app.include_router(products_router)
app.include_router(bundle_products_router)

# 库存：source item 写入（含整单同发校验）/ 删除 / 查询
app.include_router(source_items_router)

# 观测
app.include_router(metrics_router)


@app.get("/healthz")
async def healthz():
    return {"ok": True}
