import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager, suppress
from pathlib import Path

from fastapi import Depends, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse

from app.config import Settings, get_settings
from routes.payments import router as payments_router
from routes.scores import router as scores_router
from routes.sessions import router as sessions_router
from services.errors import RelayError, ValidationError
from services.store import InMemorySessionStore, sessions

logger = logging.getLogger(__name__)


async def sweep_expired_sessions(store: InMemorySessionStore, interval_seconds: float) -> None:
    while True:
        await asyncio.sleep(interval_seconds)
        store.evict_expired()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    sessions.ttl_seconds = settings.session_ttl_seconds
    sweeper = None
    if settings.session_ttl_seconds > 0 and settings.session_sweep_interval_seconds > 0:
        sweeper = asyncio.create_task(
            sweep_expired_sessions(sessions, settings.session_sweep_interval_seconds)
        )
        logger.info(
            "[main] Session expiry enabled: ttl=%ss sweep every %ss",
            settings.session_ttl_seconds,
            settings.session_sweep_interval_seconds,
        )
    try:
        yield
    finally:
        if sweeper is not None:
            sweeper.cancel()
            with suppress(asyncio.CancelledError):
                await sweeper


app = FastAPI(title="Arcade Relay API", version="0.1.0", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_response(exc: RelayError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.code, "message": exc.message},
    )


@app.exception_handler(RelayError)
async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    logger.warning(
        "[main] %s %s -> %s %s: %s",
        request.method,
        request.url.path,
        exc.status_code,
        exc.code,
        exc.message,
    )
    return error_response(exc)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("[main] %s %s rejected: %s", request.method, request.url.path, exc.errors())
    return error_response(ValidationError("Malformed request body"))


app.include_router(sessions_router, prefix="/api")
app.include_router(payments_router, prefix="/api")
app.include_router(scores_router, prefix="/api")


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


def resolve_game_file(game_dir: Path, requested: str) -> Path | None:
    """Return the static file for ``requested`` if it exists inside ``game_dir``."""
    if not requested:
        return None
    try:
        root = game_dir.resolve()
        candidate = (root / requested).resolve()
        if not candidate.is_relative_to(root) or not candidate.is_file():
            return None
    except (OSError, ValueError):
        # e.g. an embedded NUL from a percent-encoded path
        return None
    return candidate


@app.get("/{full_path:path}", include_in_schema=False)
def serve_game(full_path: str, settings: Settings = Depends(get_settings)) -> Response:
    """Static game assets, falling back to index.html for client-side routes."""
    if full_path == "api" or full_path.startswith("api/"):
        return JSONResponse(status_code=404, content={"error": "not_found", "message": "Unknown API route"})
    asset = resolve_game_file(settings.game_dir, full_path)
    if asset is not None:
        return FileResponse(asset)
    index = settings.game_dir / "index.html"
    if not index.is_file():
        logger.error("[main] Game entry document missing: %s", index)
        return JSONResponse(status_code=404, content={"error": "not_found", "message": "Game not found"})
    return FileResponse(index)
