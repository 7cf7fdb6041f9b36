import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from foodcare.core.auth import get_current_admin
from foodcare.core.config import settings
from foodcare.core.database import get_db
from foodcare.core.responses import failure_response
from foodcare.core.rate_limiter import RateLimiter
from foodcare.core.tokens import token_hint
from foodcare.models.api_key import ApiKey
from foodcare.schemas.shared import FailureResponse
from foodcare.schemas.subscription_reminder import (
    ConfirmationDetailsResponse,
    ProcessConfirmationRequest,
    ProcessConfirmationResponse,
    ReminderStatsResponse,
    SendRemindersResponse,
)
from foodcare.services.confirmation_processor import ConfirmationProcessor, parse_action
from foodcare.services.email_service import EmailService, get_email_service
from foodcare.services.errors import ConfirmationValidationError, NotFoundError, ReminderError
from foodcare.services.reminder_issuer import ReminderIssuer
from foodcare.services.reminder_stats import ReminderStatsService

logger = logging.getLogger(__name__)

router = APIRouter()

confirmation_rate_limiter = RateLimiter(
    max_requests=settings.RATE_LIMIT_CONFIRMATIONS_PER_MINUTE, window_seconds=60
)


def check_confirmation_rate_limit(request: Request) -> None:
    client_key = request.client.host if request.client else "unknown"
    if not confirmation_rate_limiter.is_allowed(client_key):
        raise HTTPException(status_code=429, detail="Too many requests, please try again later")


@router.post(
    "/send",
    response_model=SendRemindersResponse,
    summary="Run the reminder sweep",
    responses={
        401: {"description": "Unauthorized – invalid or missing API key"},
        500: {"model": FailureResponse, "description": "Sweep failed"},
    },
)
async def send_reminders(
    db: Session = Depends(get_db),
    mailer: EmailService = Depends(get_email_service),
    _admin: ApiKey = Depends(get_current_admin),
) -> SendRemindersResponse | JSONResponse:
    """Email every active subscription with a delivery inside the reminder window."""
    try:
        sent_count = await ReminderIssuer(db, mailer).send_pending_reminders()
    except Exception:
        logger.exception("Error sending subscription reminders")
        return failure_response(500, "An error occurred while sending reminders")

    return SendRemindersResponse(
        success=True,
        message=f"Sent {sent_count} reminder email(s)",
        sent_count=sent_count,
    )


@router.get(
    "/confirm",
    response_model=ConfirmationDetailsResponse,
    summary="Get confirmation details",
    responses={
        400: {"model": FailureResponse, "description": "Token is required"},
        404: {"model": FailureResponse, "description": "Confirmation not found"},
        429: {"description": "Too many requests"},
    },
)
async def get_confirmation(
    token: str | None = Query(default=None),
    db: Session = Depends(get_db),
    _rate_limit: None = Depends(check_confirmation_rate_limit),
) -> ConfirmationDetailsResponse | JSONResponse:
    """What the customer sees after following a reminder link."""
    if not token or not token.strip():
        return failure_response(400, "Token is required")

    try:
        details = ConfirmationProcessor(db).get_confirmation_details(token)
    except NotFoundError as e:
        return failure_response(404, e.message)

    return ConfirmationDetailsResponse(data=details)


@router.post(
    "/confirm",
    response_model=ProcessConfirmationResponse,
    summary="Answer a reminder",
    responses={
        400: {"model": FailureResponse, "description": "Invalid token, action or pause date"},
        429: {"description": "Too many requests"},
    },
)
async def process_confirmation(
    data: ProcessConfirmationRequest,
    db: Session = Depends(get_db),
    _rate_limit: None = Depends(check_confirmation_rate_limit),
) -> ProcessConfirmationResponse | JSONResponse:
    """Continue, pause or cancel the upcoming delivery.

    Expired, unknown or already used tokens return ``success: false`` with a
    customer-facing message.
    """
    if not isinstance(data.token, str) or not data.token.strip():
        return failure_response(400, "Token is required")

    try:
        action = parse_action(data.action, data.pause_until)
    except ConfirmationValidationError as e:
        return failure_response(400, e.message)

    try:
        result = ConfirmationProcessor(db).process_confirmation(data.token, action)
    except ReminderError as e:
        logger.info(
            "Confirmation %s rejected: %s", token_hint(data.token), e.message
        )
        return ProcessConfirmationResponse(success=False, message=e.message)

    return ProcessConfirmationResponse(
        success=True, message=result.message, action=result.action.value
    )


@router.get(
    "/statistics",
    response_model=ReminderStatsResponse,
    summary="Reminder statistics",
    responses={401: {"description": "Unauthorized – invalid or missing API key"}},
)
async def get_statistics(
    db: Session = Depends(get_db),
    _admin: ApiKey = Depends(get_current_admin),
) -> ReminderStatsResponse:
    """Counters for the admin reminder dashboard."""
    return ReminderStatsResponse(data=ReminderStatsService(db).get_statistics())
