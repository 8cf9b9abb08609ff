import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from slowapi import Limiter
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from sqlalchemy.orm import sessionmaker

from app.core.config import Settings, settings as default_settings
from app.core.exceptions import register_exception_handlers
from app.core.logging_config import setup_logging
from app.core.scheduler import PeriodicTask
from app.db.base import Base
from app.db.session import build_engine, build_session_factory

# Import all models so SQLAlchemy can discover them for table creation
from app.models import User, Company, Job, Application, PersonalToken  # noqa: F401
from app.services.applications import ApplicationService
from app.services.auth import AuthService
from app.services.storage import build_image_store

# Import API router
from app.api.api import api_router

logger = logging.getLogger("jobboard.app")


def build_periodic_tasks(session_factory: sessionmaker, config: Settings) -> list[PeriodicTask]:
    """The expired-job sweep and the expired-session sweep, each on its own session."""

    def sweep_expired_jobs() -> int:
        with session_factory() as db:
            return ApplicationService(db).handle_expired_jobs()

    def sweep_expired_sessions() -> int:
        with session_factory() as db:
            return AuthService(db, config).sweep_expired_sessions()

    return [
        PeriodicTask("expired-job-sweep", config.JOB_SWEEP_INTERVAL_SECONDS, sweep_expired_jobs),
        PeriodicTask(
            "expired-session-sweep", config.TOKEN_SWEEP_INTERVAL_SECONDS, sweep_expired_sessions
        ),
    ]


def build_limiter(config: Settings) -> Limiter:
    """The same limit on every route, counted per route and client address."""
    return Limiter(
        key_func=get_remote_address,
        default_limits=[config.rate_limit],
        storage_uri=config.RATE_LIMIT_STORAGE_URI,
        enabled=config.RATE_LIMIT_ENABLED,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create database tables and start the sweeps on startup."""
    config: Settings = app.state.settings
    setup_logging(config.LOG_LEVEL, config.LOG_FILE or None)
    Base.metadata.create_all(bind=app.state.engine)

    tasks = []
    if config.SCHEDULER_ENABLED:
        tasks = build_periodic_tasks(app.state.session_factory, config)
        for task in tasks:
            task.start()

    logger.info("%s started", config.APP_NAME)
    yield

    for task in tasks:
        await task.stop()
    app.state.engine.dispose()
    logger.info("%s stopped", config.APP_NAME)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    config = settings or default_settings

    app = FastAPI(
        title=config.APP_NAME,
        description="Job board with company job postings and candidate applications",
        version="1.0.0",
        debug=config.DEBUG,
        lifespan=lifespan,
    )

    app.state.settings = config
    app.state.engine = build_engine(config.DATABASE_URL, echo=config.DATABASE_ECHO)
    app.state.session_factory = build_session_factory(app.state.engine)
    app.state.image_store = build_image_store(config)
    app.state.limiter = build_limiter(config)

    # Must sit inside CORS: throttled responses keep their CORS headers
    app.add_middleware(SlowAPIMiddleware)

    # CORS Middleware - allowlist from env (comma-separated)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logging.getLogger("jobboard.http").info(
            "%s %s -> %s (%.1fms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response

    register_exception_handlers(app)

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    # Include API router with the versioned prefix
    app.include_router(api_router, prefix=config.API_PREFIX)

    if config.STORAGE_DRIVER == "local":
        app.mount(
            config.UPLOAD_URL_PREFIX,
            StaticFiles(directory=config.UPLOAD_DIR, check_dir=False),
            name="uploads",
        )

    return app


app = create_app()
