class PaymentError(Exception):
    """Base class for payment reconciliation errors."""


class ValidationError(PaymentError):
    """Malformed create request."""


class PaymentNotFoundError(PaymentError):
    def __init__(self, order_code):
        super().__init__(f"Payment {order_code} not found")
        self.order_code = order_code


class PersistenceError(PaymentError):
    """The payment store could not complete an operation."""


class AggregatorUnavailable(PaymentError):
    """The aggregator API could not be reached or answered badly."""
