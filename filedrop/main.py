# filedrop/main.py
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from filedrop import __version__
from filedrop.core.logging_config import logger, setup_logging
from filedrop.core.settings import Settings, get_settings
from filedrop.middleware.body_limit import BodySizeLimitMiddleware
from filedrop.middleware.request_logging import RequestLoggingMiddleware
from filedrop.observability.metrics import router as metrics_router
from filedrop.routers import uploads


def provision_uploads_dir(settings: Settings) -> None:
    # Zonder uploads-directory kan de service niet draaien: fout is fataal
    settings.UPLOADS_DIR.mkdir(parents=True, exist_ok=True)
    logger.info("uploads_dir_ready", path=str(settings.UPLOADS_DIR.resolve()))


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.LOG_LEVEL, settings.LOG_JSON)
        provision_uploads_dir(settings)
        logger.info("startup", service="filedrop", bind=settings.BIND_ADDRESS)
        yield
        logger.info("shutdown", service="filedrop")

    app = FastAPI(title="filedrop", version=__version__, lifespan=lifespan)

    # ----------------------------------------------------
    # Health
    # ----------------------------------------------------
    @app.get("/health", include_in_schema=True)
    def health() -> dict:
        return {"status": "ok"}

    # ----------------------------------------------------
    # Middleware (laatst toegevoegd = buitenste laag)
    # ----------------------------------------------------
    app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.MAX_UPLOAD_BYTES)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ----------------------------------------------------
    # Routers
    # ----------------------------------------------------
    app.include_router(uploads.router)
    if settings.METRICS_ENABLED:
        app.include_router(metrics_router)  # /metrics

    # Routes halen settings via Depends(get_settings); zelfde instance gebruiken
    app.dependency_overrides[get_settings] = lambda: settings

    return app
