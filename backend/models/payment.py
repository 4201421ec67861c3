from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum


class PaymentOutcome(str, Enum):
    """Result of a verified notification. Only GRANTED mutates a session."""

    GRANTED = "granted"
    NOT_COMPLETED = "payment_not_completed"
    WRONG_AMOUNT = "invalid_amount_or_currency"


@dataclass
class PaymentNotification:
    payment_status: str | None
    mc_gross: str | None
    mc_currency: str | None
    custom: str | None        # carries the session token
    txn_id: str | None        # logged only

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, str]]) -> PaymentNotification:
        # Last occurrence wins, as with a plain form-to-dict decode.
        fields = dict(pairs)
        return cls(
            payment_status=fields.get("payment_status"),
            mc_gross=fields.get("mc_gross"),
            mc_currency=fields.get("mc_currency"),
            custom=fields.get("custom") or None,
            txn_id=fields.get("txn_id"),
        )

    def gross_amount(self) -> Decimal | None:
        if self.mc_gross is None:
            return None
        try:
            amount = Decimal(self.mc_gross.strip())
        except InvalidOperation:
            return None
        return amount if amount.is_finite() else None
