import os
from pathlib import Path
from dotenv import load_dotenv

from storefront_payments.errors import Misconfigured

# Force-load .env from the project root (reload-safe)
BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(dotenv_path=BASE_DIR / ".env")

DEFAULT_CURRENCY = "INR"
DEFAULT_GATEWAY_URL = "https://api.razorpay.com/v1"
DEFAULT_GATEWAY_TIMEOUT = 10.0


def gateway_key_id() -> str:
    key_id = os.getenv("RAZORPAY_KEY_ID")
    if not key_id:
        raise Misconfigured("Payment gateway not configured")
    return key_id


def gateway_key_secret() -> str:
    key_secret = os.getenv("RAZORPAY_KEY_SECRET")
    if not key_secret:
        raise Misconfigured("Payment gateway not configured")
    return key_secret


def gateway_url() -> str:
    return os.getenv("RAZORPAY_API_URL", DEFAULT_GATEWAY_URL).rstrip("/")


def gateway_timeout() -> float:
    return float(os.getenv("RAZORPAY_TIMEOUT", DEFAULT_GATEWAY_TIMEOUT))


def home_currency() -> str:
    return os.getenv("STOREFRONT_CURRENCY", DEFAULT_CURRENCY)


def jwt_secret() -> str:
    secret = os.getenv("JWT_SECRET")
    if not secret:
        raise Misconfigured("Authentication not configured")
    return secret


def jwt_audience():
    return os.getenv("JWT_AUDIENCE") or None


def cors_origins() -> list:
    raw = os.getenv("CORS_ALLOW_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()
