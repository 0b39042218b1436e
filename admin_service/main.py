"""FastAPI application wiring for the admin service."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from psycopg_pool import ConnectionPool

from .api import admin, auth, client, super_admin, users
from .api.errors import install_error_handlers
from .config import Settings, get_settings
from .domain.approval import ApprovalWorkflow
from .domain.errors import ServiceError
from .domain.management import DirectoryService
from .domain.service import AccountService
from .repository import AccountRepository
from .security.authentication import AuthenticationGate
from .security.passwords import PasswordHasher
from .security.tokens import TokenService

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Attach a single stream handler to the package logger."""
    package_logger = logging.getLogger("admin_service")
    package_logger.setLevel(level)
    # Avoid duplicate handlers on reload
    if package_logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(handler)


def wire_services(app: FastAPI, repository: AccountRepository, settings: Settings) -> None:
    """Build the services with explicit configuration and hang them on ``app.state``."""
    tokens = TokenService(settings.jwt_secret, settings.jwt_issuer)
    hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    accounts = AccountService(repository, hasher, tokens)

    app.state.account_service = accounts
    app.state.directory_service = DirectoryService(repository, hasher, accounts)
    app.state.approval_workflow = ApprovalWorkflow(repository)
    app.state.authentication_gate = AuthenticationGate(repository, tokens)


def create_app(
    settings: Settings | None = None,
    repository: AccountRepository | None = None,
) -> FastAPI:
    """Create the application; tests pass a repository to skip the Postgres pool."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialise shared resources (Postgres pool, services) for the app lifecycle."""
        pool: ConnectionPool | None = None
        repo = repository
        if repo is None:
            pool = ConnectionPool(settings.database_url, open=False)
            pool.open()
            app.state.pool = pool
            repo = AccountRepository(pool)
        wire_services(app, repo, settings)
        try:
            app.state.account_service.initialize_super_admin(
                settings.super_admin_email, settings.super_admin_password
            )
        except ServiceError as exc:
            logger.error("super admin bootstrap failed: %s", exc.message)
        logger.info("%s %s ready", settings.app_name, settings.version)
        try:
            yield
        finally:
            if pool is not None:
                pool.close()

    app = FastAPI(title=settings.app_name, version=settings.version, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=600,
    )
    install_error_handlers(app, debug=settings.debug)

    @app.get("/api/health", tags=["health"])
    def health() -> dict[str, str]:
        """Return a minimal readiness indicator used by orchestration systems."""
        return {"status": "ok"}

    @app.get("/metrics", include_in_schema=False)
    def metrics() -> Response:
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    for module in (auth, super_admin, admin, client, users):
        app.include_router(module.router)

    return app


app = create_app()


def run() -> None:
    """Serve the application with uvicorn on the configured host and port."""
    import uvicorn

    settings = get_settings()
    uvicorn.run("admin_service.main:app", host=settings.http_host, port=settings.http_port)
