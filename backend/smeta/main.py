# backend/smeta/main.py
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from . import __version__
from .api import capas, documents, health, kpis, search
from .config import Settings, settings as default_settings
from .database import Database
from .errors import register_exception_handlers
from .services.uploads import UploadService
from .utils.logging import api_logger


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """Build the API; the database is opened and closed with the app lifespan"""
    app_settings = app_settings or default_settings
    database = Database(app_settings.DATABASE_URL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database.open()
        api_logger.info("SMETA API started", extra={
            "environment": app_settings.ENVIRONMENT,
            "cors_origins": app_settings.cors_origins
        })
        try:
            yield
        finally:
            database.close()

    app = FastAPI(title="SMETA Compliance API", version=__version__, lifespan=lifespan)
    app.state.settings = app_settings
    app.state.database = database
    app.state.upload_service = UploadService(app_settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        api_logger.info(f"{request.method} {request.url.path}", extra={
            "status_code": response.status_code,
            "execution_time_ms": round((time.time() - start_time) * 1000, 2)
        })
        return response

    register_exception_handlers(app)

    # Include routers
    app.include_router(health.router)
    app.include_router(documents.router)
    app.include_router(search.router)
    app.include_router(capas.router)
    app.include_router(kpis.router)

    # Serve the built frontend in production
    frontend_dist = app_settings.FRONTEND_DIST_PATH
    if not app_settings.is_development and frontend_dist and frontend_dist.is_dir():
        app.mount("/", StaticFiles(directory=str(frontend_dist), html=True), name="frontend")

    return app


app = create_app()
