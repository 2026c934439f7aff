from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
import logging

from app.api.comments import router as comments_router
from app.api.health import router as health_router
from app.api.users import router as users_router
from app.api.videos import router as videos_router
from core.db import Database, DatabaseSettings
from core.locks import KeyedLock
from core.logging import setup_json_logging

logger = logging.getLogger(__name__)


def create_app(database: Optional[Database] = None) -> FastAPI:
    """Build the API; ``database`` overrides the one configured from the environment"""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        settings = DatabaseSettings()
        store = database or Database.from_settings(settings)
        store.connect()
        if database is None and settings.database_auto_create:
            store.create_all()

        app.state.database = store
        app.state.ledger_locks = KeyedLock()
        logger.info("Store connected", extra={"trace_id": "system_init"})
        yield
        store.dispose()
        logger.info("Store disposed", extra={"trace_id": "system_shutdown"})

    app = FastAPI(title="Short Feed API", version="0.1.0", lifespan=lifespan)

    # Include routers
    app.include_router(health_router)  # Health at root level
    app.include_router(users_router, prefix="/api")
    app.include_router(videos_router, prefix="/api")
    app.include_router(comments_router, prefix="/api")
    return app


# Setup logging
setup_json_logging()

app = create_app()
