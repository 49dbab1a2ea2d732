import json
import logging
from datetime import datetime, timezone

import pydantic
from fastapi import APIRouter, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, Field, field_validator

from clinicpay import config
from clinicpay.database import payment_session
from clinicpay.errors import PaymentNotFoundError, PersistenceError, ValidationError
from clinicpay.intents import create_payment_intent, get_payment_status
from clinicpay.order_code import is_canonical_order_code
from clinicpay.reconciliation import check_payment
from clinicpay.store import PaymentStore
from clinicpay.webhook import WebhookPayload, process_webhook

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments/sepay")


class CreatePaymentRequest(BaseModel):
    orderCode: str = Field(min_length=1)
    amount: int

    @field_validator("orderCode")
    @classmethod
    def order_code_canonical(cls, value):
        value = value.strip()
        if not is_canonical_order_code(value):
            raise ValueError("orderCode must look like CLINIC<digits>")
        return value

    @field_validator("amount")
    @classmethod
    def amount_above_minimum(cls, value):
        if value < config.min_amount():
            raise ValueError(f"amount must be >= {config.min_amount()}")
        return value


@router.post("/create")
def create_payment_api(request: CreatePaymentRequest):
    with payment_session() as db:
        try:
            return create_payment_intent(PaymentStore(db), request.orderCode, request.amount)
        except ValidationError as exc:
            raise HTTPException(status_code=422, detail=str(exc))
        except PersistenceError as exc:
            raise HTTPException(status_code=500, detail=str(exc))


@router.get("/status/{order_code}")
def payment_status(order_code: str):
    with payment_session() as db:
        try:
            return get_payment_status(PaymentStore(db), order_code)
        except PaymentNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc))
        except PersistenceError as exc:
            raise HTTPException(status_code=500, detail=str(exc))


def _ingest(raw):
    payload = WebhookPayload.model_validate(raw)
    with payment_session() as db:
        return process_webhook(PaymentStore(db), payload)


@router.post("/webhook")
async def sepay_webhook(request: Request):
    # SePay retries anything that is not a 2xx, so every failure is acknowledged.
    body = await request.body()
    try:
        raw = json.loads(body or b"{}")
        if not isinstance(raw, dict):
            raise ValueError("webhook body must be a JSON object")
        outcome = await run_in_threadpool(_ingest, raw)
    except (ValueError, pydantic.ValidationError, PersistenceError) as exc:
        logger.warning("Webhook rejected: %s", exc)
        return {"message": "error", "error": str(exc)}

    logger.info("Webhook handled: %s", outcome.value)
    return {"message": "ok"}


@router.get("/check/{order_code}")
def check_payment_api(order_code: str):
    with payment_session() as db:
        try:
            result = check_payment(PaymentStore(db), order_code)
        except PersistenceError as exc:
            raise HTTPException(status_code=500, detail=str(exc))

    return {
        "success": True,
        "orderCode": order_code,
        "isPaid": result["is_paid"],
        "status": result["status"],
        "checkedAt": datetime.now(timezone.utc).isoformat(),
    }
