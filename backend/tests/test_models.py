from decimal import Decimal

from models import PaymentNotification, PaymentOutcome, PurchaseSession


def test_purchase_session_defaults() -> None:
    session = PurchaseSession(level=3)
    assert session.level == 3
    assert session.purchased is False
    assert isinstance(session.created_at, float)


def test_check_response_uses_client_field_names() -> None:
    session = PurchaseSession(level=7, purchased=True)
    assert session.to_check_response() == {"hasPurchasedContinue": True, "level": 7}


def test_notification_from_pairs_picks_known_fields() -> None:
    ipn = PaymentNotification.from_pairs(
        [
            ("payment_status", "Completed"),
            ("mc_gross", "1.99"),
            ("mc_currency", "USD"),
            ("custom", "abc"),
            ("txn_id", "TX1"),
            ("receiver_email", "shop@example.com"),
        ]
    )
    assert ipn.payment_status == "Completed"
    assert ipn.mc_currency == "USD"
    assert ipn.custom == "abc"
    assert ipn.txn_id == "TX1"
    assert ipn.gross_amount() == Decimal("1.99")


def test_notification_blank_custom_is_none() -> None:
    ipn = PaymentNotification.from_pairs([("custom", "")])
    assert ipn.custom is None
    assert ipn.payment_status is None


def test_gross_amount_rejects_garbage() -> None:
    assert PaymentNotification.from_pairs([("mc_gross", "abc")]).gross_amount() is None
    assert PaymentNotification.from_pairs([("mc_gross", "NaN")]).gross_amount() is None
    assert PaymentNotification.from_pairs([]).gross_amount() is None


def test_outcome_values_are_machine_readable() -> None:
    assert PaymentOutcome.GRANTED.value == "granted"
    assert PaymentOutcome.NOT_COMPLETED.value == "payment_not_completed"
