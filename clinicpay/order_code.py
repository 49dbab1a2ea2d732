"""Order-code parsing for free-text bank transfer narrations.

Banks and the aggregator pass the payer's transfer note through untouched,
so the order code can sit anywhere in it, in any case, with or without the
``TT`` prefix we ask customers to type.
"""
import re
from typing import Optional

ORDER_CODE_PREFIX = "CLINIC"

_PREFIXED_PATTERN = re.compile(r"(?:TT)?\s*CLINIC(\d+)", re.IGNORECASE)
_BARE_PATTERN = re.compile(r"CLINIC(\d+)", re.IGNORECASE)


def extract_order_code(description) -> Optional[str]:
    """Return the canonical ``CLINIC<digits>`` code found in ``description``, or None."""
    if not description or not isinstance(description, str):
        return None

    match = _PREFIXED_PATTERN.search(description) or _BARE_PATTERN.search(description)
    if not match:
        return None
    return f"{ORDER_CODE_PREFIX}{match.group(1)}"


_CANONICAL_PATTERN = re.compile(r"CLINIC\d+")


def is_canonical_order_code(order_code) -> bool:
    """True for codes that a webhook narration can resolve back to, e.g. ``CLINIC1001``."""
    return isinstance(order_code, str) and _CANONICAL_PATTERN.fullmatch(order_code) is not None
