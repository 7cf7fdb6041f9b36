import logging
from typing import Any

from arq import cron

from foodcare.core.database import session_scope
from foodcare.core.log_config import configure_logging
from foodcare.models.shared import utc_now
from foodcare.repositories.confirmation_repository import ConfirmationRepository
from foodcare.services.email_service import EmailService
from foodcare.services.reminder_issuer import ReminderIssuer
from foodcare.tasks import redis_settings

logger = logging.getLogger(__name__)


async def send_subscription_reminders_task(ctx: dict[str, Any]) -> int:
    """Background task: email reminders for deliveries inside the reminder window.

    Runs daily. Safe to re-run; subscriptions already reminded for their
    next delivery are not emailed again.
    """
    with session_scope() as db:
        count = await ReminderIssuer(db, EmailService()).send_pending_reminders()
    logger.info("Reminder sweep sent %d emails", count)
    return count


async def retire_expired_confirmations_task(ctx: dict[str, Any]) -> int:
    """Background task: free the open slot held by expired, unanswered tokens.

    Runs hourly.
    """
    with session_scope() as db:
        count = ConfirmationRepository(db).retire_expired(utc_now())
        db.commit()
    if count > 0:
        logger.info("Retired %d expired confirmation tokens", count)
    return count


async def startup(ctx: dict[str, Any]) -> None:
    configure_logging()


class WorkerSettings:
    functions = [
        send_subscription_reminders_task,
        retire_expired_confirmations_task,
    ]
    cron_jobs = [
        cron(send_subscription_reminders_task, hour=1, minute=0),  # daily at 01:00 UTC
        cron(retire_expired_confirmations_task, minute={0}),  # hourly
    ]
    on_startup = startup
    redis_settings = redis_settings
