"""Tests for arq enqueue helpers."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from foodcare.tasks import (
    enqueue_retire_expired_confirmations,
    enqueue_send_subscription_reminders,
    enqueue_task,
    get_redis_pool,
)


class TestTasks:
    @pytest.mark.asyncio
    async def test_get_redis_pool(self):
        mock_pool = MagicMock()

        with patch("foodcare.tasks.create_pool", new_callable=AsyncMock) as mock_create:
            mock_create.return_value = mock_pool
            assert await get_redis_pool() == mock_pool
            mock_create.assert_called_once()

    @pytest.mark.asyncio
    async def test_enqueue_task_closes_pool_on_error(self):
        mock_pool = MagicMock()
        mock_pool.enqueue_job = AsyncMock(side_effect=ConnectionError("Redis error"))
        mock_pool.close = AsyncMock()

        with patch("foodcare.tasks.get_redis_pool", new_callable=AsyncMock) as mock_get_pool:
            mock_get_pool.return_value = mock_pool
            with pytest.raises(ConnectionError, match="Redis error"):
                await enqueue_task("failing_task")

        mock_pool.close.assert_called_once()

    @pytest.mark.asyncio
    async def test_enqueue_send_subscription_reminders(self):
        with patch("foodcare.tasks.enqueue_task", new_callable=AsyncMock) as mock_enqueue:
            mock_enqueue.return_value = MagicMock(job_id="job-1")
            job = await enqueue_send_subscription_reminders()

        assert job.job_id == "job-1"
        mock_enqueue.assert_called_once_with("send_subscription_reminders_task")

    @pytest.mark.asyncio
    async def test_enqueue_retire_expired_confirmations(self):
        with patch("foodcare.tasks.enqueue_task", new_callable=AsyncMock) as mock_enqueue:
            await enqueue_retire_expired_confirmations()

        mock_enqueue.assert_called_once_with("retire_expired_confirmations_task")
