# app/main.py
from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.api.health import router as health_router
from app.api.routers.metrics import router as metrics_router
from app.api.routers.order_webhooks import router as order_webhooks_router
from app.core.config import get_settings
from app.core.logging import setup_logging
from app.obs.metrics import PrometheusMiddleware

setup_logging(get_settings().LOG_LEVEL)
logger = logging.getLogger("pickup")

APP_NAME = "PICKUP-REASSIGN"
APP_VERSION = "1.0.0"

app = FastAPI(
    title=APP_NAME,
    version=APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(PrometheusMiddleware)


@app.exception_handler(Exception)
async def _unhandled_exc(_req: Request, exc: Exception):
    logger.exception("UNHANDLED_EXC: %s", exc)
    return JSONResponse(status_code=500, content={"detail": "INTERNAL_ERROR"})


@app.exception_handler(RequestValidationError)
async def _validation_exc(_req: Request, exc: RequestValidationError):
    safe = exc.errors()
    return JSONResponse(status_code=422, content={"detail": safe})


@app.exception_handler(HTTPException)
async def _http_exc(_req: Request, exc: HTTPException):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


# ===========================
#          挂载路由
# ===========================
app.include_router(health_router)
app.include_router(order_webhooks_router)
app.include_router(metrics_router)


@app.get("/")
async def root():
    return {"name": APP_NAME, "version": APP_VERSION}
