"""PayPal Instant Payment Notification endpoint. Called by PayPal, not by the game."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from app.config import Settings, get_settings
from models.payment import PaymentOutcome
from services.errors import RelayError, UpstreamError
from services.payments import handle_payment_notification
from services.paypal import IpnVerifier
from services.store import SessionStore, get_session_store

router = APIRouter(tags=["payments"])
logger = logging.getLogger(__name__)

_OUTCOME_TEXT = {
    PaymentOutcome.GRANTED: "OK",
    PaymentOutcome.NOT_COMPLETED: "Payment not completed",
    PaymentOutcome.WRONG_AMOUNT: "Invalid payment amount or currency",
}


def get_ipn_verifier(settings: Settings = Depends(get_settings)) -> IpnVerifier:
    return IpnVerifier(settings.paypal_ipn_url, timeout=settings.outbound_timeout_seconds)


@router.post("/paypal-ipn", response_class=PlainTextResponse)
async def paypal_ipn(
    request: Request,
    verifier: IpnVerifier = Depends(get_ipn_verifier),
    store: SessionStore = Depends(get_session_store),
    settings: Settings = Depends(get_settings),
) -> PlainTextResponse:
    """
    Answers 200 for every verified notification it has finished with, including
    payments it ignores, so PayPal stops redelivering. 400 for a failed
    verification or unknown session, 500 when the verifier cannot be reached.
    """
    logger.info("[payments] Received IPN request")
    raw_body = await request.body()
    try:
        outcome = await handle_payment_notification(
            raw_body,
            verifier=verifier,
            store=store,
            price=settings.continue_price,
            currency=settings.continue_currency,
        )
    except UpstreamError:
        return PlainTextResponse("Server Error", status_code=500)
    except RelayError as exc:
        return PlainTextResponse(exc.message, status_code=exc.status_code)
    return PlainTextResponse(_OUTCOME_TEXT[outcome], status_code=200)
