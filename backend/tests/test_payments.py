"""Tests for the acceptance policy applied to verified notifications."""

from __future__ import annotations

from decimal import Decimal
from urllib.parse import urlencode

import pytest

from models.payment import PaymentOutcome
from services.errors import UpstreamError, VerificationFailure
from services.payments import handle_payment_notification
from services.store import InMemorySessionStore

PRICE = Decimal("1.99")


class _FakeVerifier:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[bytes] = []

    async def verify(self, raw_body: bytes) -> None:
        self.calls.append(raw_body)
        if self.error is not None:
            raise self.error


def _ipn(token: str, **overrides: str) -> bytes:
    fields = {
        "payment_status": "Completed",
        "mc_gross": "1.99",
        "mc_currency": "USD",
        "custom": token,
        "txn_id": "TX123",
    }
    fields.update(overrides)
    return urlencode(fields).encode()


async def _handle(body: bytes, store: InMemorySessionStore, verifier: _FakeVerifier | None = None) -> PaymentOutcome:
    return await handle_payment_notification(
        body,
        verifier=verifier or _FakeVerifier(),
        store=store,
        price=PRICE,
        currency="USD",
    )


@pytest.mark.anyio
async def test_completed_payment_grants_continue() -> None:
    store = InMemorySessionStore()
    token = store.create(5)
    outcome = await _handle(_ipn(token), store)
    assert outcome is PaymentOutcome.GRANTED
    assert store.get(token).purchased is True
    assert store.get(token).level == 5


@pytest.mark.anyio
async def test_equivalent_decimal_amount_is_accepted() -> None:
    store = InMemorySessionStore()
    token = store.create(1)
    assert await _handle(_ipn(token, mc_gross="1.990"), store) is PaymentOutcome.GRANTED


@pytest.mark.anyio
@pytest.mark.parametrize("status", ["Pending", "Refunded", "completed", ""])
async def test_incomplete_payment_is_ignored(status: str) -> None:
    store = InMemorySessionStore()
    token = store.create(1)
    outcome = await _handle(_ipn(token, payment_status=status), store)
    assert outcome is PaymentOutcome.NOT_COMPLETED
    assert store.get(token).purchased is False


@pytest.mark.anyio
@pytest.mark.parametrize(
    "overrides",
    [
        {"mc_gross": "0.99"},
        {"mc_gross": "1.98999"},
        {"mc_gross": "free"},
        {"mc_currency": "EUR"},
    ],
)
async def test_wrong_amount_or_currency_is_ignored(overrides: dict[str, str]) -> None:
    store = InMemorySessionStore()
    token = store.create(1)
    outcome = await _handle(_ipn(token, **overrides), store)
    assert outcome is PaymentOutcome.WRONG_AMOUNT
    assert store.get(token).purchased is False


@pytest.mark.anyio
@pytest.mark.parametrize("token", ["", "f" * 64])
async def test_unknown_session_raises(token: str) -> None:
    store = InMemorySessionStore()
    with pytest.raises(VerificationFailure) as excinfo:
        await _handle(_ipn(token), store)
    assert excinfo.value.code == "invalid_session"


@pytest.mark.anyio
async def test_checks_short_circuit_before_session_lookup() -> None:
    store = InMemorySessionStore()
    # Unknown token, but the status check fails first.
    outcome = await _handle(_ipn("f" * 64, payment_status="Pending"), store)
    assert outcome is PaymentOutcome.NOT_COMPLETED


@pytest.mark.anyio
@pytest.mark.parametrize(
    "error",
    [VerificationFailure("IPN Verification Failed"), UpstreamError("IPN verification request failed")],
)
async def test_verifier_errors_leave_session_untouched(error: Exception) -> None:
    store = InMemorySessionStore()
    token = store.create(1)
    verifier = _FakeVerifier(error=error)
    with pytest.raises(type(error)):
        await _handle(_ipn(token), store, verifier)
    assert len(verifier.calls) == 1
    assert store.get(token).purchased is False


@pytest.mark.anyio
async def test_replayed_notification_keeps_session_purchased() -> None:
    store = InMemorySessionStore()
    token = store.create(1)
    await _handle(_ipn(token), store)
    assert await _handle(_ipn(token), store) is PaymentOutcome.GRANTED
    assert store.get(token).purchased is True
