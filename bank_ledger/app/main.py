import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from .api.exceptions import register_exception_handlers
from .api.routes import accounts_router, transfer_router, users_router
from .core.config import Settings, get_settings
from .core.db import create_engine_for_url, init_db

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_db(app.state.engine)
        yield
        app.state.engine.dispose()

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.engine = create_engine_for_url(settings.database_url)

    app.include_router(users_router)
    app.include_router(accounts_router)
    app.include_router(transfer_router)
    register_exception_handlers(app)

    @app.get("/health")
    def read_health() -> dict[str, str]:
        return {"status": "ok"}

    return app

app = create_app()
