from .payment import PaymentNotification, PaymentOutcome
from .session import PurchaseSession

__all__ = [
    "PurchaseSession",
    "PaymentNotification",
    "PaymentOutcome",
]
