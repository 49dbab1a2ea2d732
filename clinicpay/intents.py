import logging
from urllib.parse import quote

from clinicpay import config
from clinicpay.errors import PaymentNotFoundError, ValidationError
from clinicpay.order_code import is_canonical_order_code
from clinicpay.store import PaymentStore

logger = logging.getLogger(__name__)


def build_bank_info(order_code: str):
    bank = config.bank_settings()
    return {
        "bankCode": bank["bank_code"],
        "accountNumber": bank["account_number"],
        "accountName": bank["account_name"],
        "transferContent": f"{config.transfer_content_prefix()}{order_code}",
    }


def build_qr_url(bank_info, amount: int) -> str:
    return (
        f"{config.qr_image_base_url()}/"
        f"{bank_info['bankCode']}-{bank_info['accountNumber']}-compact2.jpg"
        f"?amount={amount}&addInfo={quote(bank_info['transferContent'], safe='')}"
    )


def create_payment_intent(store: PaymentStore, order_code: str, amount: int):
    """Create a PENDING intent, or return the existing one for ``order_code``.

    The QR URL is recomputed on every call, so repeated calls for the same
    order return the same payload.
    """
    order_code = (order_code or "").strip()
    if not order_code:
        raise ValidationError("orderCode must not be empty")
    if not is_canonical_order_code(order_code):
        raise ValidationError("orderCode must look like CLINIC<digits>")
    if isinstance(amount, bool) or not isinstance(amount, int) or amount < config.min_amount():
        raise ValidationError(f"amount must be an integer >= {config.min_amount()}")

    payment = store.find_by_order_code(order_code)
    if payment:
        logger.warning("Order %s already exists, returning it", order_code)
    else:
        payment = store.create(order_code, amount)
        logger.info("Created pending payment %s for %s (%s)", payment.id, order_code, amount)

    bank_info = build_bank_info(order_code)
    return {
        "orderCode": order_code,
        "amount": payment.amount,
        "qrUrl": build_qr_url(bank_info, payment.amount),
        "bankInfo": bank_info,
        "status": payment.status.value,
    }


def get_payment_status(store: PaymentStore, order_code: str):
    payment = store.find_by_order_code(order_code)
    if not payment:
        raise PaymentNotFoundError(order_code)
    return {"status": payment.status.value}
