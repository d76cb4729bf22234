"""
Request dependencies: the service container, the authenticated caller
and per-caller rate limits.
"""

from dataclasses import dataclass

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.api.rate_limit import InMemoryRateLimiter, RateLimit
from src.config.settings import Settings
from src.core.errors import RateLimited, Unauthenticated
from src.core.use_cases.get_pending_verifications import GetPendingVerificationsUseCase
from src.core.use_cases.get_verification_status import GetVerificationStatusUseCase
from src.core.use_cases.submit_documents import SubmitDocumentsUseCase
from src.core.use_cases.update_verification_status import UpdateVerificationStatusUseCase
from src.infrastructure.db.database import Database
from src.infrastructure.security.tokens import decode_token


@dataclass
class ServiceContainer:
    """Everything a request needs, built once per application."""
    settings: Settings
    database: Database
    submit_documents: SubmitDocumentsUseCase
    get_status: GetVerificationStatusUseCase
    update_status: UpdateVerificationStatusUseCase
    get_pending: GetPendingVerificationsUseCase
    submit_limiter: InMemoryRateLimiter
    update_limiter: InMemoryRateLimiter


_bearer = HTTPBearer(auto_error=False)


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    container: ServiceContainer = Depends(get_container),
) -> str:
    """User id from the bearer token; Unauthenticated otherwise."""
    if credentials is None or not credentials.credentials:
        raise Unauthenticated()
    settings = container.settings
    payload = decode_token(
        credentials.credentials,
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        audience=settings.jwt_audience,
    )
    return str(payload["sub"])


def build_limiter(max_requests: int, window_seconds: int) -> InMemoryRateLimiter:
    return InMemoryRateLimiter(RateLimit(max_requests=max_requests, window_seconds=window_seconds))


class CallerRateLimit:
    """Dependency enforcing one of the container's limiters for the caller."""

    def __init__(self, scope: str):
        self.scope = scope

    def __call__(
        self,
        user_id: str = Depends(get_current_user_id),
        container: ServiceContainer = Depends(get_container),
    ) -> str:
        limiter = getattr(container, f"{self.scope}_limiter")
        if not limiter.allow(f"{self.scope}:{user_id}"):
            raise RateLimited()
        return user_id
