"""Request bodies that may arrive as JSON or as a urlencoded form post."""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar
from urllib.parse import parse_qsl

import pydantic
from fastapi import Request

from services.errors import ValidationError

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

M = TypeVar("M", bound=pydantic.BaseModel)


def _decode(raw: bytes, content_type: str) -> Any:
    if content_type.split(";", 1)[0].strip().lower() == FORM_CONTENT_TYPE:
        pairs = parse_qsl(raw.decode("utf-8", errors="replace"), keep_blank_values=True)
        # Blank form fields count as absent.
        return {key: value for key, value in pairs if value != ""}
    if not raw.strip():
        return {}
    return json.loads(raw)


def json_or_form(model: type[M]) -> Callable[[Request], Awaitable[M]]:
    """Dependency that validates a JSON or form body into ``model``; bad input is a 400."""

    async def parse(request: Request) -> M:
        raw = await request.body()
        try:
            return model.model_validate(_decode(raw, request.headers.get("content-type", "")))
        except (ValueError, pydantic.ValidationError) as exc:
            logger.warning("[forms] %s %s rejected: %s", request.method, request.url.path, exc)
            raise ValidationError("Malformed request body") from exc

    return parse
