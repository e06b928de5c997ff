import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront_payments import config
from storefront_payments.routes import router, VERIFY_PAYMENT_PATH
from storefront_payments.database import Base, engine
from storefront_payments.errors import PaymentError
from storefront_payments import models  # noqa: F401  registers tables

logging.basicConfig(
    level=config.log_level(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Storefront Payment Service")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins(),
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)

app.include_router(router)

Base.metadata.create_all(bind=engine)


def _error_response(request: Request, status_code: int, message: str) -> JSONResponse:
    content = {"error": message}
    # verify-payment failures always report the verification outcome
    if request.url.path == VERIFY_PAYMENT_PATH:
        content = {"verified": False, **content}
    return JSONResponse(status_code=status_code, content=content)


@app.exception_handler(PaymentError)
async def payment_error_handler(request: Request, exc: PaymentError):
    return _error_response(request, exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.error("Rejected malformed request to %s: %s", request.url.path, exc.errors())
    return _error_response(request, 400, "Invalid request")


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})
