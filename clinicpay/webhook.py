import enum
import logging
import time
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator

from clinicpay.models import PaymentStatus
from clinicpay.order_code import extract_order_code
from clinicpay.store import PaymentStore

logger = logging.getLogger(__name__)


class WebhookPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    transaction_id: Optional[str] = None
    order_code: Optional[str] = None    # not trusted, the description wins
    amount: Optional[float] = None
    account_number: Optional[str] = None
    description: Optional[str] = None
    transfer_time: Optional[str] = None

    @field_validator("transaction_id", "account_number", mode="before")
    @classmethod
    def numbers_as_text(cls, value: Union[str, int, None]):
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class WebhookOutcome(str, enum.Enum):
    APPLIED = "applied"
    ALREADY_PAID = "already_paid"
    IGNORED_UNPARSEABLE = "ignored_unparseable"
    IGNORED_UNKNOWN_ORDER = "ignored_unknown_order"


def fallback_transaction_id() -> str:
    return f"TX_{int(time.time() * 1000)}"


def process_webhook(store: PaymentStore, payload: WebhookPayload) -> WebhookOutcome:
    """Apply one SePay notification. Safe to call again with the same payload."""
    order_code = extract_order_code(payload.description)
    if not order_code:
        logger.warning("Webhook without a recognisable order code: %r", payload.description)
        return WebhookOutcome.IGNORED_UNPARSEABLE

    payment = store.find_by_order_code(order_code)
    if not payment:
        logger.warning("Webhook for unknown order %s dropped", order_code)
        return WebhookOutcome.IGNORED_UNKNOWN_ORDER

    if payment.status == PaymentStatus.PAID:
        logger.info("Order %s already paid, webhook ignored", order_code)
        return WebhookOutcome.ALREADY_PAID

    applied = store.mark_paid(
        order_code,
        payload.transaction_id or fallback_transaction_id(),
        payload.description,
    )
    if not applied:
        logger.info("Order %s was settled concurrently", order_code)
        return WebhookOutcome.ALREADY_PAID

    logger.info("Webhook confirmed payment for %s (amount=%s)", order_code, payload.amount)
    return WebhookOutcome.APPLIED
