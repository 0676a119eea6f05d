from __future__ import annotations

import asyncio
import uuid
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import get_settings
from app.core.logging import configure_logging, get_logger
from app.routers import customs, quotes, rates
from app.services.rate_cache import get_rate_cache

settings = get_settings()

configure_logging(settings.log_level)
logger = get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # warm the rate cache without holding up startup; reads use the fallback until it lands
    warmup = asyncio.create_task(get_rate_cache().refresh())
    yield
    await warmup


app = FastAPI(
    title=settings.app_name,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(rates.router, prefix=settings.api_prefix)
app.include_router(customs.router, prefix=settings.api_prefix)
app.include_router(quotes.router, prefix=settings.api_prefix)


@app.get("/")
async def root():
    return {"service": settings.app_name, "environment": settings.environment}


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id
    structlog.contextvars.bind_contextvars(request_id=request_id)
    try:
        response = await call_next(request)
    finally:
        structlog.contextvars.unbind_contextvars("request_id")
    logger.info("request", path=str(request.url.path), method=request.method, status=response.status_code)
    response.headers["X-Request-ID"] = request_id
    return response
