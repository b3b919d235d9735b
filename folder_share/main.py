# folder_share/main.py

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from folder_share import config
from folder_share.db.base import async_engine
from folder_share.middleware.cors import CORSHeadersMiddleware
from folder_share.middleware.error_handler import ErrorHandlerMiddleware, setup_exception_handlers
from folder_share.middleware.rate_limiter import FixedWindowRateLimiter, PublishRateLimitMiddleware
from folder_share.observability.logger import configure_logging
from folder_share.observability.metrics import router as metrics_router
from folder_share.observability.tracing import init_tracing
from folder_share.routers.health import router as health_router
from folder_share.routers.share import router as share_router
from folder_share.utils.logger import log_info
from folder_share.utils.redis_client import close_redis, get_redis


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(config)
    log_info(f"Server starting at http://{config.HOST}:{config.PORT}")
    yield
    log_info("Starting graceful shutdown...")
    await close_redis()
    await async_engine.dispose()
    log_info("Shutdown complete.")


def create_app() -> FastAPI:
    settings = config.get_settings()

    app = FastAPI(
        title="Folder Share API",
        description="Publish world folders and fetch them back by share id",
        version="1.0.0",
        lifespan=lifespan,
        # /api/share/folder/ is unmatched, not a redirect
        redirect_slashes=False,
    )

    # Starlette wraps in reverse order: the last middleware added is outermost.
    if settings.PUBLISH_RATE_LIMIT_PER_HOUR > 0:
        limiter = FixedWindowRateLimiter(get_redis(), settings.PUBLISH_RATE_LIMIT_PER_HOUR)
        app.add_middleware(PublishRateLimitMiddleware, limiter=limiter)
    app.add_middleware(ErrorHandlerMiddleware)
    # Outermost, so preflight never reaches routing and every error carries CORS
    app.add_middleware(CORSHeadersMiddleware)

    setup_exception_handlers(app)

    app.include_router(share_router, prefix="/api")
    app.include_router(health_router)
    app.include_router(metrics_router)

    init_tracing(settings, app=app, engine=async_engine)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("folder_share.main:app", host=config.HOST, port=config.PORT, log_level=config.LOG_LEVEL.lower())
