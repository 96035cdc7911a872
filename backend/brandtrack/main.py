"""
AI Brand Track
FastAPI application factory
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from brandtrack import __version__
from brandtrack.api.routes import api_router
from brandtrack.config import get_settings
from brandtrack.utils import close_db, init_db, is_serverless
from brandtrack.utils.logger import configure_logging

logger = logging.getLogger(__name__)

DESCRIPTION = """
Track how ChatGPT, Claude, Gemini and Perplexity mention your brand and its
competitors: composite AI Brand Strength, consistency checks, historical
snapshots with trends, and cited source domains.
"""


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Tables are created on startup except on serverless deployments"""
    if is_serverless():
        yield
        return

    await init_db()
    yield
    await close_db()


async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    content = {"detail": "Internal server error"}
    if get_settings().DEBUG:
        content = {"detail": str(exc), "type": type(exc).__name__}
    return JSONResponse(status_code=500, content=content)


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)

    application = FastAPI(
        title="AI Brand Track API",
        description=DESCRIPTION,
        version=__version__,
        lifespan=lifespan,
        redoc_url="/redoc" if settings.is_development else None,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_exception_handler(Exception, unhandled_error)
    application.include_router(api_router, prefix=f"/api/{settings.API_VERSION}")

    @application.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "version": __version__,
            "environment": settings.APP_ENV,
        }

    @application.get("/")
    async def root():
        return {"name": application.title, "version": __version__, "docs": application.docs_url}

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "brandtrack.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.is_development,
        workers=1 if settings.is_development else settings.WORKERS,
    )
