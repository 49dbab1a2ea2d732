import logging
import re

from clinicpay import config
from clinicpay.aggregator_client import list_transactions
from clinicpay.errors import AggregatorUnavailable
from clinicpay.models import PaymentStatus
from clinicpay.store import PaymentStore
from clinicpay.webhook import fallback_transaction_id

logger = logging.getLogger(__name__)


def _transaction_text(tx) -> str:
    return tx.get("transaction_content") or tx.get("content") or tx.get("description") or ""


def find_matching_transaction(transactions, order_code: str):
    # CLINIC2002 must not settle on a transfer for CLINIC20021.
    needle = re.compile(re.escape(order_code) + r"(?!\d)", re.IGNORECASE)
    for tx in transactions:
        if isinstance(tx, dict) and needle.search(str(_transaction_text(tx))):
            return tx
    return None


def check_payment(store: PaymentStore, order_code: str):
    """Confirm a payment by polling SePay when the webhook has not arrived.

    Never raises for aggregator problems: the caller gets the last known
    status back instead.
    """
    payment = store.find_by_order_code(order_code)
    if not payment:
        logger.warning("Payment not found: %s", order_code)
        return {"is_paid": False, "status": PaymentStatus.FAILED.value}

    if payment.status == PaymentStatus.PAID:
        return {"is_paid": True, "status": PaymentStatus.PAID.value}

    current = {"is_paid": False, "status": payment.status.value}

    api_key = config.sepay_api_key()
    if not api_key:
        logger.warning("SEPAY_API_KEY is not set, skipping poll for %s", order_code)
        return current

    try:
        transactions = list_transactions(api_key, config.bank_settings()["account_number"])
    except AggregatorUnavailable as exc:
        logger.warning("SePay check failed for %s: %s", order_code, exc)
        return current

    matched = find_matching_transaction(transactions, order_code)
    if not matched:
        return current

    transaction_id = matched.get("id") or matched.get("transaction_id")
    store.mark_paid(
        order_code,
        str(transaction_id) if transaction_id else fallback_transaction_id(),
        _transaction_text(matched),
    )
    logger.info("Updated %s to PAID via polling", order_code)
    return {"is_paid": True, "status": PaymentStatus.PAID.value}
