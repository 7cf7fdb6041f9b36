import logging
from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from foodcare.core.auth import get_current_admin
from foodcare.core.database import get_db
from foodcare.core.responses import failure_response
from foodcare.models.api_key import ApiKey
from foodcare.models.subscription import Frequency, SubscriptionStatus
from foodcare.schemas.admin_subscription import (
    AdminSubscriptionDetailResponse,
    AdminSubscriptionListResponse,
    SendReminderRequest,
    SendReminderResponse,
    SubscriptionFilters,
)
from foodcare.schemas.shared import FailureResponse
from foodcare.services.admin_reminders import AdminReminderDispatcher
from foodcare.services.admin_subscriptions import AdminSubscriptionService
from foodcare.services.email_service import EmailService, get_email_service

logger = logging.getLogger(__name__)

router = APIRouter()

UNAUTHORIZED = {401: {"description": "Unauthorized – invalid or missing API key"}}


@router.post(
    "/send-reminders",
    response_model=SendReminderResponse,
    summary="Send reminders to selected subscriptions",
    responses={
        **UNAUTHORIZED,
        400: {"model": FailureResponse, "description": "No subscriptions selected"},
        500: {"model": FailureResponse, "description": "Unexpected error"},
    },
)
async def send_reminders(
    data: SendReminderRequest,
    db: Session = Depends(get_db),
    mailer: EmailService = Depends(get_email_service),
    _admin: ApiKey = Depends(get_current_admin),
) -> SendReminderResponse | JSONResponse:
    """Issue reminders for the given subscriptions; failures are reported per subscription."""
    if not data.subscription_ids:
        return failure_response(400, "Please select at least one subscription")

    try:
        result = await AdminReminderDispatcher(db, mailer).send_manual_reminders(
            data.subscription_ids, custom_message=data.custom_message
        )
    except Exception:
        logger.exception("Error sending manual reminders")
        return failure_response(500, "An error occurred while sending reminders")

    return SendReminderResponse(success=result.success, data=result)


@router.get(
    "",
    response_model=AdminSubscriptionListResponse,
    summary="List subscriptions",
    responses=UNAUTHORIZED,
)
async def list_subscriptions(
    status: SubscriptionStatus | None = None,
    frequency: Frequency | None = None,
    search_term: str | None = Query(default=None, alias="searchTerm"),
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=200, alias="pageSize"),
    db: Session = Depends(get_db),
    _admin: ApiKey = Depends(get_current_admin),
) -> AdminSubscriptionListResponse:
    """Filter by status, frequency, customer search and start-date range, newest first."""
    filters = SubscriptionFilters(
        status=status,
        frequency=frequency,
        search_term=search_term,
        start_date=start_date,
        end_date=end_date,
        page=page,
        page_size=page_size,
    )
    return AdminSubscriptionListResponse(
        data=AdminSubscriptionService(db).list_subscriptions(filters)
    )


@router.get(
    "/{subscription_id}",
    response_model=AdminSubscriptionDetailResponse,
    summary="Get subscription detail",
    responses={
        **UNAUTHORIZED,
        404: {"model": FailureResponse, "description": "Subscription not found"},
    },
)
async def get_subscription(
    subscription_id: UUID,
    db: Session = Depends(get_db),
    _admin: ApiKey = Depends(get_current_admin),
) -> AdminSubscriptionDetailResponse | JSONResponse:
    """Subscription with customer, product and reminder history."""
    detail = AdminSubscriptionService(db).get_subscription_detail(subscription_id)
    if detail is None:
        return failure_response(404, "Subscription not found")
    return AdminSubscriptionDetailResponse(data=detail)
