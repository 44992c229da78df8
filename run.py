"""Entry point for the CleanConnect API server.

Starts the FastAPI application with Uvicorn.  It is intended to be
executed from the project root, for example under Docker, where you only
specify a single Python file to run.

Host and port are read from the environment variables ``HOST`` and
``PORT`` (defaults ``0.0.0.0`` and ``5000``).  Application settings
(``JWT_SECRET``, ``DATABASE_URL``...) are read by
``cleanconnect_api.app.core.config``.

Usage:
    python run.py
"""
import asyncio
import os

from uvicorn import Config, Server

from cleanconnect_api.app.core.config import settings
from cleanconnect_api.app.main import app


async def main() -> None:
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "5000"))
    config = Config(app=app, host=host, port=port, reload=False, log_level=settings.log_level.lower())
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
