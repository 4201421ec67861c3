"""Continue-purchase session API: mint a token, then poll it."""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from routes.forms import json_or_form
from services.errors import NotFoundError, ValidationError
from services.store import SessionStore, get_session_store, short_token

router = APIRouter(tags=["sessions"])
logger = logging.getLogger(__name__)


class CreateSessionRequest(BaseModel):
    level: int | None = None


class CreateSessionResponse(BaseModel):
    sessionToken: str


class CheckContinueResponse(BaseModel):
    hasPurchasedContinue: bool
    level: int


@router.post("/create-session", response_model=CreateSessionResponse)
async def create_session(
    body: CreateSessionRequest = Depends(json_or_form(CreateSessionRequest)),
    store: SessionStore = Depends(get_session_store),
) -> CreateSessionResponse:
    """Create a session for the level the player died on, before redirecting to PayPal."""
    if body.level is None:
        raise ValidationError("Level is required")
    if body.level < 0:
        raise ValidationError("Level must not be negative")
    token = store.create(body.level)
    logger.info("[sessions] Session created: token=%s level=%d", short_token(token), body.level)
    return CreateSessionResponse(sessionToken=token)


@router.get("/check-continue/{token}", response_model=CheckContinueResponse)
async def check_continue(
    token: str,
    store: SessionStore = Depends(get_session_store),
) -> CheckContinueResponse:
    """Polled by the game after checkout. Sessions are left in place; expiry reclaims them."""
    session = store.get(token)
    if session is None:
        raise NotFoundError("Session not found")
    return CheckContinueResponse(**session.to_check_response())
