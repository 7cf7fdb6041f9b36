from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from foodcare.core.auth import get_current_customer
from foodcare.core.database import get_db
from foodcare.schemas.subscription import (
    SubscriptionCreate,
    SubscriptionOption,
    SubscriptionResponse,
)
from foodcare.services.errors import InvalidTransitionError, NotFoundError
from foodcare.services.subscription_service import SubscriptionService

router = APIRouter()

UNAUTHORIZED = {401: {"description": "Unauthorized – missing or invalid customer token"}}


@router.get(
    "/options",
    response_model=list[SubscriptionOption],
    summary="List subscription frequencies",
)
async def get_subscription_options(
    db: Session = Depends(get_db),
) -> list[SubscriptionOption]:
    """Available delivery frequencies and their discounts."""
    return SubscriptionService(db).get_subscription_options()


@router.post(
    "",
    response_model=SubscriptionResponse,
    status_code=201,
    summary="Create subscription",
    responses={
        **UNAUTHORIZED,
        404: {"description": "Customer or product not found"},
        422: {"description": "Validation error"},
    },
)
async def create_subscription(
    data: SubscriptionCreate,
    db: Session = Depends(get_db),
    customer_id: UUID = Depends(get_current_customer),
) -> SubscriptionResponse:
    """Subscribe the signed-in customer to a product."""
    service = SubscriptionService(db)
    try:
        subscription = service.create_subscription(data, customer_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from None
    return service.to_response(subscription)


@router.get(
    "/my",
    response_model=list[SubscriptionResponse],
    summary="List my subscriptions",
    responses=UNAUTHORIZED,
)
async def get_my_subscriptions(
    db: Session = Depends(get_db),
    customer_id: UUID = Depends(get_current_customer),
) -> list[SubscriptionResponse]:
    """The signed-in customer's subscriptions, newest first."""
    return SubscriptionService(db).get_customer_subscriptions(customer_id)


@router.put(
    "/{subscription_id}/pause",
    status_code=204,
    summary="Pause subscription",
    responses={
        **UNAUTHORIZED,
        404: {"description": "Subscription not found"},
        409: {"description": "Subscription is cancelled"},
    },
)
async def pause_subscription(
    subscription_id: UUID,
    pause_until: date = Query(alias="pauseUntil"),
    db: Session = Depends(get_db),
    customer_id: UUID = Depends(get_current_customer),
) -> Response:
    """Skip deliveries until the given date."""
    try:
        SubscriptionService(db).pause_subscription(subscription_id, customer_id, pause_until)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from None
    except InvalidTransitionError as e:
        raise HTTPException(status_code=409, detail=e.message) from None
    return Response(status_code=204)


@router.put(
    "/{subscription_id}/resume",
    status_code=204,
    summary="Resume subscription",
    responses={
        **UNAUTHORIZED,
        404: {"description": "Subscription not found"},
        409: {"description": "Subscription is cancelled"},
    },
)
async def resume_subscription(
    subscription_id: UUID,
    db: Session = Depends(get_db),
    customer_id: UUID = Depends(get_current_customer),
) -> Response:
    """Reactivate a paused subscription."""
    try:
        SubscriptionService(db).resume_subscription(subscription_id, customer_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from None
    except InvalidTransitionError as e:
        raise HTTPException(status_code=409, detail=e.message) from None
    return Response(status_code=204)


@router.put(
    "/{subscription_id}/cancel",
    status_code=204,
    summary="Cancel subscription",
    responses={**UNAUTHORIZED, 404: {"description": "Subscription not found"}},
)
async def cancel_subscription(
    subscription_id: UUID,
    db: Session = Depends(get_db),
    customer_id: UUID = Depends(get_current_customer),
) -> Response:
    """Cancel permanently. Cancelling twice is a no-op."""
    try:
        SubscriptionService(db).cancel_subscription(subscription_id, customer_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from None
    return Response(status_code=204)
