import logging
from typing import Optional

import httpx

from clinicpay import config
from clinicpay.errors import AggregatorUnavailable

logger = logging.getLogger(__name__)


def list_transactions(api_key: str, account_number: str, limit: Optional[int] = None):
    """Fetch the most recent transactions seen by SePay for one account."""
    url = f"{config.sepay_base_url().rstrip('/')}/transactions/list"
    try:
        response = httpx.get(
            url,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            params={
                "account_number": account_number,
                "limit": limit or config.sepay_poll_limit(),
            },
            timeout=config.sepay_timeout(),
        )
        response.raise_for_status()
        data = response.json()
    except httpx.HTTPError as exc:
        raise AggregatorUnavailable(f"SePay request failed: {exc}") from exc
    except ValueError as exc:
        raise AggregatorUnavailable("SePay returned a non-JSON body") from exc

    if not isinstance(data, dict):
        raise AggregatorUnavailable("SePay returned an unexpected body")
    transactions = data.get("transactions")
    if transactions is None:
        return []
    if not isinstance(transactions, list):
        raise AggregatorUnavailable("SePay returned a non-list transactions field")
    return transactions
