import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from api.api import router as api_router
from core.config import Settings
from core.db import Database
from core.errors import register_exception_handlers
from services.probe import ContentProbe

logger = logging.getLogger("pagewatch")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    logging.basicConfig(level=settings.log_level)

    database = Database(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database.create_all()
        logger.info("database ready")
        yield
        database.dispose()

    app = FastAPI(
        title="Pagewatch API",
        version="1.0",
        description="Track regions of web pages by CSS selector and preview what they contain.",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database
    app.state.probe = ContentProbe(settings)
    register_exception_handlers(app)
    app.include_router(api_router)
    return app

def main():
    import uvicorn
    settings = Settings.from_env()
    uvicorn.run("main:create_app", factory=True, host="0.0.0.0", port=settings.port, log_level="info")

if __name__ == "__main__":
    main()
