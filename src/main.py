"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from config.settings import settings
from src.qa_auction.api.router import router as auction_router
from src.qa_bidding.api.router import router as bidding_router
from src.qa_closing.api.router import router as closing_router
from src.qa_common.database import check_database, engine
from src.qa_common.errors import AppError
from src.qa_common.middleware.request_log import RequestLogMiddleware
from src.qa_common.redis_client import check_redis, close_redis
from src.qa_common.response import error_response, with_request_id
from src.qa_results.api.router import router as results_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB + Redis connections. Shutdown: dispose."""
    # Startup
    await check_database()
    await check_redis()
    logger.info("%s started", settings.APP_NAME)
    yield
    # Shutdown
    await engine.dispose()
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = with_request_id(error_response(exc.code, exc.message, exc.details), request)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


app.include_router(auction_router, prefix="/api/v1")
app.include_router(bidding_router, prefix="/api/v1")
app.include_router(closing_router, prefix="/api/v1")
app.include_router(results_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
