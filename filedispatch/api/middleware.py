import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from filedispatch.config import settings
from filedispatch.core.exceptions import FileDispatchError

logger = logging.getLogger(__name__)


async def handle_filedispatch_error(request: Request, exc: FileDispatchError) -> JSONResponse:
    """Rend toute erreur du noyau sous la forme {"error": kind, "detail": message}"""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.kind}: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.kind}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def setup_middlewares(app: FastAPI) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(FileDispatchError, handle_filedispatch_error)
