from arq import cron
from arq.connections import RedisSettings
from opentelemetry import trace

from folder_share import config
from folder_share.db.base import async_engine
from folder_share.observability.logger import configure_logging
from folder_share.observability.tracing import init_tracing
from folder_share.services.share_service import build_share_service
from folder_share.utils.redis_client import close_redis


async def cleanup_expired_shares(ctx) -> dict:
    """Periodic sweep: drop shares past their expiration (row, then blob)."""
    tracer = trace.get_tracer("worker")
    service = build_share_service(config.get_settings())
    with tracer.start_as_current_span("cleanup_expired_shares"):
        removed = await service.cleanup_expired()
    await ctx["redis"].incrby("jobs:cleanup:removed", removed)
    return {"removed": removed}


class WorkerSettings:
    functions = [cleanup_expired_shares]
    redis_settings = RedisSettings.from_dsn(config.REDIS_URL)
    cron_jobs = [
        cron(cleanup_expired_shares, minute=0),
    ]

    @staticmethod
    async def startup(ctx):
        configure_logging(config)
        init_tracing(config.get_settings(), engine=async_engine)

    @staticmethod
    async def shutdown(ctx):
        await close_redis()
        await async_engine.dispose()
