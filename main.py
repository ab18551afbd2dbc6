"""
LINE memo bot: ASGI application.

Serves:
  - POST /webhook/line  (LINE Messaging API webhook)
  - GET /health/live, GET /health/ready

Run: uvicorn main:app --host 0.0.0.0 --port 8000
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config import Config
from infra import bootstrap_infrastructure
from transport.line.webhook import router as line_router

logging.basicConfig(
    level=Config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

APP_NAME = "LINE Memo Bot"
APP_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Build the use case once per process and release backends on shutdown.

    A use case already placed on app.state (tests) is left untouched.
    """
    Config.validate()
    infra = None
    if getattr(app.state, "line_bot_use_case", None) is None:
        infra = bootstrap_infrastructure()
        app.state.line_bot_use_case = infra.use_case
        logger.info(f"{APP_NAME} ready ({Config.ENVIRONMENT}): {infra!r}")

    yield

    close = getattr(infra.memo_store, "close", None) if infra else None
    if close is not None:
        close()
    logger.info(f"{APP_NAME} stopped")


app = FastAPI(
    title=APP_NAME,
    description="Per-user memos, image generation and echo over the LINE Messaging API",
    version=APP_VERSION,
    lifespan=lifespan,
)


@app.middleware("http")
async def catch_unhandled(request: Request, call_next):
    """Log every request; unhandled errors become a bare 500."""
    logger.debug(f"{request.method} {request.url.path}")
    try:
        return await call_next(request)
    except Exception as e:
        logger.error(f"Unhandled error on {request.url.path}: {e}", exc_info=True)
        return JSONResponse(status_code=500, content={})


app.include_router(line_router)


@app.get("/health/live")
async def health_live():
    return {"status": "alive"}


@app.get("/health/ready")
async def health_ready(request: Request):
    """Ready once LINE credentials are set and the use case is built."""
    missing = Config.missing()
    if missing:
        return {"status": "not_ready", "reason": f"missing {', '.join(missing)}"}
    if getattr(request.app.state, "line_bot_use_case", None) is None:
        return {"status": "not_ready", "reason": "use case not initialized"}
    return {"status": "ready"}


@app.get("/")
async def root():
    return {
        "name": APP_NAME,
        "version": APP_VERSION,
        "endpoints": {
            "line_webhook": "POST /webhook/line",
            "liveness": "GET /health/live",
            "readiness": "GET /health/ready",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=Config.APP_PORT,
        reload=Config.ENVIRONMENT == "development",
    )
