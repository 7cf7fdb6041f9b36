"""Customer responses to reminder emails (continue, pause, cancel)."""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import ClassVar
from uuid import UUID

from sqlalchemy.orm import Session

from foodcare.core.tokens import token_hint
from foodcare.models.shared import as_utc, utc_now
from foodcare.models.subscription_confirmation import (
    ConfirmationAction,
    SubscriptionConfirmation,
)
from foodcare.repositories.confirmation_repository import ConfirmationRepository
from foodcare.repositories.product_repository import ProductRepository
from foodcare.repositories.subscription_repository import SubscriptionRepository
from foodcare.schemas.subscription_reminder import ConfirmationDetails
from foodcare.services.errors import (
    AlreadyProcessedError,
    ConcurrencyConflictError,
    ConfirmationValidationError,
    ExpiredError,
    NotFoundError,
)
from foodcare.services.subscription_state import SubscriptionStateMachine

logger = logging.getLogger(__name__)

UNKNOWN_PRODUCT = "Unknown Product"


@dataclass(frozen=True)
class ContinueAction:
    kind: ClassVar[ConfirmationAction] = ConfirmationAction.CONTINUE


@dataclass(frozen=True)
class PauseAction:
    until: date
    kind: ClassVar[ConfirmationAction] = ConfirmationAction.PAUSE


@dataclass(frozen=True)
class CancelAction:
    kind: ClassVar[ConfirmationAction] = ConfirmationAction.CANCEL


Action = ContinueAction | PauseAction | CancelAction


def _parse_pause_date(value: object) -> date:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ConfirmationValidationError("A pause date is required to pause deliveries")
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            pass
    raise ConfirmationValidationError("Invalid pause date. Expected YYYY-MM-DD")


def parse_action(action: object, pause_until: object = None) -> Action:
    """Parse raw request input into an action variant.

    ``pause_until`` may be a ``date`` or an ISO ``YYYY-MM-DD`` string.

    Raises:
        ConfirmationValidationError: Unknown action, or a pause with a
            missing or malformed date.
    """
    if action is None or (isinstance(action, str) and not action.strip()):
        raise ConfirmationValidationError("Action is required")
    if not isinstance(action, str):
        raise ConfirmationValidationError("Invalid action. Expected continue, pause or cancel")
    try:
        kind = ConfirmationAction(action.strip().lower())
    except ValueError:
        raise ConfirmationValidationError(
            f"Invalid action '{action}'. Expected continue, pause or cancel"
        ) from None

    if kind == ConfirmationAction.PAUSE:
        return PauseAction(until=_parse_pause_date(pause_until))
    if kind == ConfirmationAction.CANCEL:
        return CancelAction()
    return ContinueAction()


@dataclass
class ProcessResult:
    subscription_id: UUID
    action: ConfirmationAction
    message: str


def _result_message(action: Action) -> str:
    if isinstance(action, PauseAction):
        return f"Your subscription is paused until {action.until.strftime('%d/%m/%Y')}"
    if isinstance(action, CancelAction):
        return "Your subscription has been cancelled"
    return "Your subscription will continue as scheduled"


def _is_expired(confirmation: SubscriptionConfirmation, now: datetime) -> bool:
    return now > as_utc(confirmation.expires_at)  # type: ignore[arg-type]


class ConfirmationProcessor:
    def __init__(self, db: Session):
        self.db = db
        self.confirmation_repo = ConfirmationRepository(db)
        self.subscription_repo = SubscriptionRepository(db)
        self.product_repo = ProductRepository(db)
        self.state_machine = SubscriptionStateMachine()

    def _get_confirmation(self, token: str) -> SubscriptionConfirmation:
        confirmation = self.confirmation_repo.get_by_token(token) if token else None
        if confirmation is None:
            logger.warning("Confirmation token %s not found", token_hint(token))
            raise NotFoundError("Confirmation not found")
        return confirmation

    def get_confirmation_details(
        self, token: str, now: datetime | None = None
    ) -> ConfirmationDetails:
        """Read-only view of a confirmation for the customer landing page."""
        if now is None:
            now = utc_now()

        confirmation = self._get_confirmation(token)
        subscription = self.subscription_repo.get_by_id(
            confirmation.subscription_id  # type: ignore[arg-type]
        )
        if subscription is None:
            raise NotFoundError("Subscription not found")

        product = self.product_repo.get_by_id(subscription.product_id)  # type: ignore[arg-type]
        unit_price = Decimal(str(product.base_price)) if product is not None else Decimal("0")
        discount = Decimal(str(subscription.discount_percent or 0))
        total = unit_price * int(subscription.quantity) * (Decimal("100") - discount) / 100  # type: ignore[call-overload]

        return ConfirmationDetails(
            subscription_id=subscription.id,  # type: ignore[arg-type]
            product_name=str(product.name) if product is not None else UNKNOWN_PRODUCT,
            product_image=product.image_url if product is not None else None,  # type: ignore[arg-type]
            scheduled_delivery_date=confirmation.scheduled_delivery_date,  # type: ignore[arg-type]
            frequency=str(subscription.frequency),
            quantity=int(subscription.quantity),  # type: ignore[call-overload]
            total_amount=total.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP),
            expires_at=as_utc(confirmation.expires_at),  # type: ignore[arg-type]
            is_expired=_is_expired(confirmation, now),
            is_already_processed=confirmation.processed_at is not None,
            customer_response=confirmation.customer_response,  # type: ignore[arg-type]
        )

    def process_confirmation(
        self, token: str, action: Action, now: datetime | None = None
    ) -> ProcessResult:
        """Consume a token exactly once and apply the customer's choice.

        The token claim and the subscription change commit together; on any
        failure both are rolled back and the token remains usable.

        Raises:
            NotFoundError: Unknown token.
            ExpiredError: Token is past its expiry.
            AlreadyProcessedError: Token was already consumed (including by a
                concurrent request, as ConcurrencyConflictError).
            InvalidTransitionError: The subscription cannot take the action.
        """
        if now is None:
            now = utc_now()

        confirmation = self._get_confirmation(token)
        if _is_expired(confirmation, now):
            raise ExpiredError("This confirmation link has expired")
        if confirmation.processed_at is not None:
            raise AlreadyProcessedError("This confirmation has already been processed")

        subscription = self.subscription_repo.get_by_id(
            confirmation.subscription_id  # type: ignore[arg-type]
        )
        if subscription is None:
            raise NotFoundError("Subscription not found")

        pause_until = action.until if isinstance(action, PauseAction) else None
        try:
            self.state_machine.apply_action(subscription, action.kind, pause_until)
            if not self.confirmation_repo.claim(
                confirmation.id, action.kind, now  # type: ignore[arg-type]
            ):
                raise ConcurrencyConflictError("This confirmation has already been processed")
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            "Confirmation %s processed for subscription %s: %s",
            token_hint(token),
            subscription.id,
            action.kind.value,
        )
        return ProcessResult(
            subscription_id=subscription.id,  # type: ignore[arg-type]
            action=action.kind,
            message=_result_message(action),
        )
