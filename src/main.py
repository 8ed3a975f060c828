from __future__ import annotations

import logging
import os

from fastapi import FastAPI

from src import __version__
from src.api.sessions import router as sessions_router
from src.api.skiptrace import router as skiptrace_router
from src.env_loader import load_env_file

load_env_file()


def configure_logging() -> None:
    level_name = os.getenv("SKIPTRACE_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


configure_logging()

app = FastAPI(title="MNUDA Skip Trace Service", version=__version__)
app.include_router(skiptrace_router)
app.include_router(sessions_router)


@app.get("/health", tags=["meta"])
async def health() -> dict[str, str]:
    return {"status": "ok"}
