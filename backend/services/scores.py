"""Relay for the PocketBase high-score collection."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from services.errors import UpstreamError

logger = logging.getLogger(__name__)


class ScoreStoreClient:
    def __init__(
        self,
        base_url: str,
        collection: str,
        token: str,
        *,
        timeout: float | None = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.records_url = f"{base_url.rstrip('/')}/api/collections/{collection}/records"
        self._token = token
        self._timeout = timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def _request(self, method: str, failure: str, **kwargs: Any) -> Any:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.request(method, self.records_url, headers=self._headers(), **kwargs)
                if not response.is_success:
                    logger.error(
                        "[scores] Store responded with status %s: %s",
                        response.status_code,
                        response.text,
                    )
                    raise UpstreamError(failure)
                return response.json()
        except httpx.HTTPError as exc:
            logger.error("[scores] %s: %s", failure, exc)
            raise UpstreamError(failure) from exc
        except ValueError as exc:
            logger.error("[scores] %s: store returned invalid JSON (%s)", failure, exc)
            raise UpstreamError(failure) from exc

    async def list_scores(self) -> Any:
        """Fetch score records, highest first. The store's payload is returned untouched."""
        return await self._request("GET", "Failed to fetch high scores", params={"sort": "-score"})

    async def submit_score(self, score: int, player_name: str, level: int = 1) -> Any:
        payload = {"score": score, "player_name": player_name, "level": level}
        record = await self._request("POST", "Failed to save high score", json=payload)
        logger.info("[scores] Saved score %s for %r (level %s).", score, player_name, level)
        return record
