"""Subscription status transitions: active, paused, cancelled (terminal).

The state machine mutates the ORM object in place and never commits; the
caller owns the transaction so a transition can be applied atomically with
other writes (e.g. consuming a confirmation token).
"""

import logging
from datetime import date

from foodcare.models.shared import utc_now
from foodcare.models.subscription import Subscription, SubscriptionStatus
from foodcare.models.subscription_confirmation import ConfirmationAction
from foodcare.services.errors import InvalidTransitionError

logger = logging.getLogger(__name__)


class SubscriptionStateMachine:
    """Guarded status transitions for a single subscription."""

    def pause(self, subscription: Subscription, until: date) -> None:
        """active -> paused, or re-pause a paused subscription with a new date."""
        self._ensure_not_cancelled(subscription, "pause")
        subscription.status = SubscriptionStatus.PAUSED.value  # type: ignore[assignment]
        subscription.pause_until = until  # type: ignore[assignment]
        self._touch(subscription)
        logger.info("Subscription %s paused until %s", subscription.id, until)

    def resume(self, subscription: Subscription) -> None:
        """paused -> active. Leaves next_delivery_date untouched."""
        self._ensure_not_cancelled(subscription, "resume")
        if subscription.status == SubscriptionStatus.ACTIVE.value:
            return
        subscription.status = SubscriptionStatus.ACTIVE.value  # type: ignore[assignment]
        subscription.pause_until = None  # type: ignore[assignment]
        self._touch(subscription)
        logger.info("Subscription %s resumed", subscription.id)

    def cancel(self, subscription: Subscription) -> None:
        """active/paused -> cancelled. Cancelling twice is a no-op."""
        if subscription.status == SubscriptionStatus.CANCELLED.value:
            return
        subscription.status = SubscriptionStatus.CANCELLED.value  # type: ignore[assignment]
        subscription.pause_until = None  # type: ignore[assignment]
        self._touch(subscription)
        logger.info("Subscription %s cancelled", subscription.id)

    def apply_action(
        self,
        subscription: Subscription,
        action: ConfirmationAction,
        pause_until: date | None = None,
    ) -> None:
        """Apply a customer's confirmation response to the subscription."""
        if action == ConfirmationAction.CONTINUE:
            return
        if action == ConfirmationAction.PAUSE:
            if pause_until is None:
                raise InvalidTransitionError("A pause requires a pause-until date")
            self.pause(subscription, pause_until)
        elif action == ConfirmationAction.CANCEL:
            self.cancel(subscription)

    @staticmethod
    def _ensure_not_cancelled(subscription: Subscription, operation: str) -> None:
        if subscription.status == SubscriptionStatus.CANCELLED.value:
            raise InvalidTransitionError(
                f"Cannot {operation} subscription {subscription.id}: it is cancelled"
            )

    @staticmethod
    def _touch(subscription: Subscription) -> None:
        subscription.updated_at = utc_now()  # type: ignore[assignment]
