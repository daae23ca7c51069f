import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from filedispatch.api.middleware import setup_middlewares
from filedispatch.api.router import router
from filedispatch.config import settings
from filedispatch.core.database import db_manager
from filedispatch.core.logging import setup_logging

setup_logging(level=settings.LOG_LEVEL, log_file=settings.LOG_FILE)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Démarrage de {settings.APP_NAME}...")
    db_manager.create_tables()
    yield
    logger.info(f"{settings.APP_NAME} arrêté proprement")


app = FastAPI(
    title=f"{settings.APP_NAME} API",
    description="Règles de tri automatique des fichiers, journal d'exécution et annulation",
    version="1.0.0",
    lifespan=lifespan
)

setup_middlewares(app)
app.include_router(router)


if __name__ == "__main__":
    uvicorn.run("filedispatch.main:app", host="127.0.0.1", port=8000, reload=settings.DEBUG)
