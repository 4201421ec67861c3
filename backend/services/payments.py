"""Acceptance policy for verified PayPal notifications."""

from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal

from models.payment import PaymentNotification, PaymentOutcome
from services.errors import VerificationFailure
from services.paypal import IpnVerifier, parse_notification_body
from services.store import SessionStore, short_token

logger = logging.getLogger(__name__)


async def handle_payment_notification(
    raw_body: bytes,
    *,
    verifier: IpnVerifier,
    store: SessionStore,
    price: Decimal,
    currency: str,
) -> PaymentOutcome:
    """
    Verify an IPN and grant the continue it pays for.

    Checks stop at the first failure. A payment that is not completed or has
    the wrong amount/currency is reported as an outcome (the caller answers
    200 so PayPal does not redeliver). An unknown session token raises
    ``VerificationFailure``.
    """
    await verifier.verify(raw_body)

    ipn = PaymentNotification.from_pairs(parse_notification_body(raw_body))
    logger.info(
        "[payments] Verified IPN: payment_status=%s mc_gross=%s mc_currency=%s custom=%s txn_id=%s",
        ipn.payment_status,
        ipn.mc_gross,
        ipn.mc_currency,
        short_token(ipn.custom),
        ipn.txn_id,
    )

    if ipn.payment_status != "Completed":
        logger.info("[payments] Payment not completed. Status: %s", ipn.payment_status)
        return PaymentOutcome.NOT_COMPLETED

    if ipn.mc_currency != currency or ipn.gross_amount() != price:
        logger.info(
            "[payments] Invalid payment amount or currency: %s %s (expected %s %s)",
            ipn.mc_gross,
            ipn.mc_currency,
            price,
            currency,
        )
        return PaymentOutcome.WRONG_AMOUNT

    session = store.get(ipn.custom) if ipn.custom else None
    if session is None:
        logger.error("[payments] Invalid or missing session token: %s", short_token(ipn.custom))
        raise VerificationFailure("Invalid session", code="invalid_session")

    store.set(ipn.custom, replace(session, purchased=True))
    logger.info(
        "[payments] Payment successful for session %s (txn_id=%s). Granted continue for level %d.",
        short_token(ipn.custom),
        ipn.txn_id,
        session.level,
    )
    return PaymentOutcome.GRANTED
