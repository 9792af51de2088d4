"""FastAPI app factory."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from emblemic import __version__
from emblemic.config import settings

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.emblemic_log_level.upper(), logging.INFO),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Emblemic",
        description="App-icon composition and export engine",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition", "X-Emblemic-Warnings", "X-Emblemic-Width", "X-Emblemic-Height"],
    )

    from emblemic.api.router import api_router

    app.include_router(api_router)

    return app


app = create_app()
