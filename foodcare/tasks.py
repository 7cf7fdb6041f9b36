from typing import Any

from arq import create_pool
from arq.connections import ArqRedis, RedisSettings
from arq.jobs import Job

from foodcare.core.config import settings

redis_settings = RedisSettings.from_dsn(settings.REDIS_URL)


async def get_redis_pool() -> ArqRedis:
    """Open an arq Redis pool."""
    return await create_pool(redis_settings)


async def enqueue_task(task_name: str, *args: Any, **kwargs: Any) -> Job | None:
    """Enqueue a task to the arq worker.

    Returns None when a job with the same ``_job_id`` is already queued.
    """
    pool = await get_redis_pool()
    try:
        return await pool.enqueue_job(task_name, *args, **kwargs)
    finally:
        await pool.close()


async def enqueue_send_subscription_reminders() -> Job | None:
    """Enqueue an out-of-schedule reminder sweep."""
    return await enqueue_task("send_subscription_reminders_task")


async def enqueue_retire_expired_confirmations() -> Job | None:
    return await enqueue_task("retire_expired_confirmations_task")
