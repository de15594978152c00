# kushalwear/main.py
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI

from kushalwear.api import api_router
from kushalwear.api.errors import register_exception_handlers
from kushalwear.data.database import Database
from kushalwear.services.lock_service import BaseLockService, build_lock_service
from kushalwear.utils.logging import get_logger
from kushalwear.utils.settings import API_PREFIX, APP_VERSION, DATABASE_URL, ENVIRONMENT

logger = get_logger(__name__)


def create_app(database: Database | None = None, lock_service: BaseLockService | None = None) -> FastAPI:
    """
    Sklada aplikacje. Baza i lock service moga przyjsc z zewnatrz (testy),
    domyslnie budowane z settings przy starcie.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.database = database or Database(DATABASE_URL)
        app.state.lock_service = lock_service or build_lock_service()
        app.state.started_at = datetime.now(timezone.utc)

        app.state.database.create_all()
        logger.info(f"KushalWear API {APP_VERSION} started ({ENVIRONMENT})")
        try:
            yield
        finally:
            app.state.database.dispose()
            logger.info("KushalWear API stopped")

    app = FastAPI(
        title="KushalWear API",
        version=APP_VERSION,
        lifespan=lifespan,
    )

    register_exception_handlers(app)
    app.include_router(api_router, prefix=API_PREFIX)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
