import os
from pathlib import Path
from dotenv import load_dotenv

# Force-load .env (Windows-safe, reload-safe)
BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(dotenv_path=BASE_DIR / ".env")

DEFAULT_SEPAY_BASE_URL = "https://my.sepay.vn/userapi"
DEFAULT_QR_IMAGE_BASE_URL = "https://img.vietqr.io/image"


def database_url():
    url = os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set. Check your .env file.")
    return url


def sepay_api_key():
    return os.getenv("SEPAY_API_KEY") or None


def sepay_base_url():
    return os.getenv("SEPAY_BASE_URL") or DEFAULT_SEPAY_BASE_URL


def sepay_timeout() -> float:
    return float(os.getenv("SEPAY_TIMEOUT_SECONDS", "30"))


def sepay_poll_limit() -> int:
    return int(os.getenv("SEPAY_POLL_LIMIT", "50"))


def bank_settings():
    return {
        "bank_code": os.getenv("SEPAY_BANK_CODE") or "TPBANK",
        "account_number": os.getenv("SEPAY_ACCOUNT_NUMBER", ""),
        "account_name": os.getenv("SEPAY_ACCOUNT_NAME", ""),
    }


def qr_image_base_url():
    return (os.getenv("QR_IMAGE_BASE_URL") or DEFAULT_QR_IMAGE_BASE_URL).rstrip("/")


def transfer_content_prefix():
    return os.getenv("TRANSFER_CONTENT_PREFIX", "TT ")


def min_amount() -> int:
    return int(os.getenv("PAYMENT_MIN_AMOUNT", "1000"))


def log_level():
    return os.getenv("LOG_LEVEL", "INFO").upper()
