"""High-score relay to the PocketBase collection."""

import logging
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.config import Settings, get_settings
from routes.forms import json_or_form
from services.errors import ValidationError
from services.scores import ScoreStoreClient

router = APIRouter(tags=["scores"])
logger = logging.getLogger(__name__)

DEFAULT_LEVEL = 1


class SubmitScoreRequest(BaseModel):
    score: int | None = None
    player_name: str | None = None
    level: int | None = None


def get_score_client(settings: Settings = Depends(get_settings)) -> ScoreStoreClient:
    return ScoreStoreClient(
        settings.pocketbase_url,
        settings.pocketbase_collection,
        settings.pocketbase_token,
        timeout=settings.outbound_timeout_seconds,
    )


@router.get("/scores")
async def list_scores(client: ScoreStoreClient = Depends(get_score_client)) -> Any:
    return await client.list_scores()


@router.post("/scores", status_code=201)
async def submit_score(
    body: SubmitScoreRequest = Depends(json_or_form(SubmitScoreRequest)),
    client: ScoreStoreClient = Depends(get_score_client),
) -> Any:
    player_name = (body.player_name or "").strip()
    if body.score is None or not player_name:
        raise ValidationError("Score and player_name are required")
    level = body.level if body.level is not None else DEFAULT_LEVEL
    return await client.submit_score(body.score, player_name, level)
