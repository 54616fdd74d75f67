"""
Account token service — application entry point.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.middleware import register_middleware
from auth.credential_store import SqlCredentialStore
from auth.gateway import AuthGateway
from auth.routes import router as auth_router
from auth.session_store import SqlSessionStore
from config.settings import config
from database.session import async_session_factory, init_models

logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
    stream=sys.stdout,
)
for _noisy in ("sqlalchemy.engine", "asyncpg"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def build_gateway() -> AuthGateway:
    """Gateway backed by the configured database."""
    return AuthGateway(
        credentials=SqlCredentialStore(async_session_factory),
        sessions=SqlSessionStore(async_session_factory),
    )


def create_app(gateway: Optional[AuthGateway] = None) -> FastAPI:
    app = FastAPI(
        title="Account Token Service",
        version="1.0.0",
        description="Signup, login and opaque bearer-token sessions.",
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middleware(app)

    # Routes
    app.include_router(auth_router, prefix="/login")

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    uses_database = gateway is None
    app.state.gateway = gateway or build_gateway()

    if uses_database:
        @app.on_event("startup")
        async def on_startup():
            if config.auto_create_tables:
                logger.info("Ensuring database schema…")
                await init_models()
            logger.info("Application ready to accept requests.")

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )
