"""PayPal IPN verification round-trip."""

from __future__ import annotations

import logging
from urllib.parse import parse_qsl

import httpx

from services.errors import UpstreamError, VerificationFailure

logger = logging.getLogger(__name__)

VERIFY_COMMAND = b"cmd=_notify-validate"
VERIFIED = "VERIFIED"


def parse_notification_body(raw_body: bytes) -> list[tuple[str, str]]:
    """Decode a form-encoded IPN body for reading fields, keeping order and blank values."""
    return parse_qsl(raw_body.decode("utf-8", errors="replace"), keep_blank_values=True)


def build_verification_body(raw_body: bytes) -> bytes:
    """
    Echo the notification back untouched, with any ``cmd`` field swapped for the
    validate command. PayPal compares bytes, so nothing is decoded here.
    """
    segments = [
        segment
        for segment in raw_body.split(b"&")
        if segment and segment.split(b"=", 1)[0] != b"cmd"
    ]
    segments.append(VERIFY_COMMAND)
    return b"&".join(segments)


class IpnVerifier:
    """Posts a received notification back to PayPal and checks for the literal VERIFIED reply."""

    def __init__(
        self,
        verify_url: str,
        *,
        timeout: float | None = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.verify_url = verify_url
        self._timeout = timeout
        self._transport = transport

    async def verify(self, raw_body: bytes) -> None:
        """
        Raise ``VerificationFailure`` unless the verifier answers exactly ``VERIFIED``.

        Transport failures raise ``UpstreamError``. Nothing is retried.
        """
        body = build_verification_body(raw_body)
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(
                    self.verify_url,
                    content=body,
                    headers={"Content-Type": "application/x-www-form-urlencoded"},
                )
                result = response.text
        except httpx.HTTPError as exc:
            logger.error("[paypal] Verification request to %s failed: %s", self.verify_url, exc)
            raise UpstreamError("IPN verification request failed") from exc

        if result != VERIFIED:
            logger.error(
                "[paypal] IPN verification failed: status=%s reply=%.60r",
                response.status_code,
                result,
            )
            raise VerificationFailure("IPN Verification Failed")
