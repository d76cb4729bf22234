"""
FastAPI Application: Identity Verification Service.

Architecture:
  - PostgreSQL (prod) / SQLite (dev, tests) for users, profiles,
    document references and verification history
  - Use cases built once per app with their dependencies injected
  - Email notifications sent on a background thread pool
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.dependencies import ServiceContainer, build_limiter
from src.api.errors import register_exception_handlers
from src.api.routes.identity import router as identity_router
from src.config.settings import Settings, get_settings
from src.core.interfaces.notification_service import INotificationDispatcher
from src.core.use_cases.get_pending_verifications import GetPendingVerificationsUseCase
from src.core.use_cases.get_verification_status import GetVerificationStatusUseCase
from src.core.use_cases.submit_documents import SubmitDocumentsUseCase
from src.core.use_cases.update_verification_status import UpdateVerificationStatusUseCase
from src.infrastructure.db.database import Database
from src.infrastructure.db.repository import unit_of_work_factory
from src.infrastructure.notifications.dispatcher import BackgroundEmailDispatcher
from src.infrastructure.notifications.smtp_email import SmtpEmailSender

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


def configure_logging(level: str):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def build_notifier(settings: Settings) -> BackgroundEmailDispatcher:
    sender = SmtpEmailSender(
        host=settings.smtp_host,
        port=settings.smtp_port,
        user=settings.smtp_user,
        password=settings.smtp_password,
        use_tls=settings.smtp_use_tls,
        from_email=settings.mail_from,
    )
    return BackgroundEmailDispatcher(
        sender=sender,
        brand_name=settings.brand_name,
        max_workers=settings.notification_workers,
    )


def build_container(
    settings: Settings,
    database: Database,
    notifier: INotificationDispatcher | None,
) -> ServiceContainer:
    """Factory: build use cases with concrete adapters."""
    uow_factory = unit_of_work_factory(database)
    window = settings.rate_limit_window_seconds
    return ServiceContainer(
        settings=settings,
        database=database,
        submit_documents=SubmitDocumentsUseCase(uow_factory, notifier=notifier),
        get_status=GetVerificationStatusUseCase(uow_factory, history_limit=settings.history_limit),
        update_status=UpdateVerificationStatusUseCase(uow_factory, notifier=notifier),
        get_pending=GetPendingVerificationsUseCase(uow_factory),
        submit_limiter=build_limiter(settings.submit_rate_limit, window),
        update_limiter=build_limiter(settings.update_rate_limit, window),
    )


def create_app(
    settings: Settings | None = None,
    database: Database | None = None,
    notifier: INotificationDispatcher | None = None,
) -> FastAPI:
    """Build the application. Tests pass their own database and notifier."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    database = database or Database(settings.database_url)
    database.init_db()
    if notifier is None:
        notifier = build_notifier(settings)

    app = FastAPI(
        title="Identity Verification Service",
        description="Identity document submission, admin review queue and verification status.",
        version=VERSION,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.container = build_container(settings, database, notifier)
    register_exception_handlers(app)
    app.include_router(identity_router, prefix="/api/identity", tags=["Identity"])

    @app.get("/health")
    def health():
        db_ok = database.ping()
        return {
            "status": "ok" if db_ok else "degraded",
            "version": VERSION,
            "database": "PostgreSQL" if "postgres" in database.url else "SQLite",
            "database_ok": db_ok,
        }

    @app.on_event("shutdown")
    def shutdown():
        if isinstance(notifier, BackgroundEmailDispatcher):
            notifier.shutdown(wait=False)
        database.dispose()

    logger.info(f"Identity Verification Service ready ({settings.env})")
    return app


if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run("src.api.main:create_app", factory=True, host=_settings.api_host, port=_settings.api_port)
