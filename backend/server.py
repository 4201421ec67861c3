"""Run the relay with uvicorn: ``python server.py`` or the ``arcade-relay`` script."""

import logging
import os

import uvicorn
from dotenv import load_dotenv

# Load .env from backend dir before settings are read
load_dotenv(os.path.join(os.path.dirname(__file__), ".env"))


def main() -> None:
    from app.config import get_settings
    from app.main import app

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    for route in app.routes:
        if hasattr(route, "path") and hasattr(route, "methods"):
            logging.info("App route: %s %s", sorted(route.methods) if route.methods else "GET", route.path)
    logging.info("Arcade relay listening on http://%s:%d", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
