"""Error taxonomy for the order-payment flow.

Every error carries the HTTP status it renders as and a message that is
safe to return to the caller. Provider-internal details belong in logs.
"""


class PaymentError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message=None, status_code=None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class Unauthorized(PaymentError):
    status_code = 401
    default_message = "Unauthorized"


class Forbidden(PaymentError):
    status_code = 403
    default_message = "Unauthorized: user mismatch"


class InvalidArgument(PaymentError):
    status_code = 400
    default_message = "Invalid request"


class Misconfigured(PaymentError):
    status_code = 500
    default_message = "Payment gateway not configured"


class GatewayError(PaymentError):
    status_code = 502
    default_message = "Failed to create order"


class PaymentVerificationFailed(PaymentError):
    status_code = 400
    default_message = "Payment verification failed"


class OrderNotFound(PaymentError):
    status_code = 404
    default_message = "Order not found"


class OrderStateError(PaymentError):
    status_code = 409
    default_message = "Order cannot be confirmed"


class PersistenceWarning(UserWarning):
    """A verified payment whose order bookkeeping could not be written."""
