# storefront/api/deps.py
import redis
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.services.auth_service import AuthService
from storefront.services.policy import Action, authorize
from storefront.services.rate_limiter import RateLimiter
from storefront.utils.settings import (
    RATE_LIMIT_API_MAX,
    RATE_LIMIT_API_WINDOW_SECONDS,
    RATE_LIMIT_AUTH_MAX,
    RATE_LIMIT_AUTH_WINDOW_SECONDS,
    RATE_LIMIT_ENABLED,
    REDIS_URL,
)

bearer = HTTPBearer(auto_error=False)

_redis_client: redis.Redis | None = None


def get_redis() -> redis.Redis:
    global _redis_client
    if _redis_client is None:
        _redis_client = redis.Redis.from_url(REDIS_URL, decode_responses=True)
    return _redis_client


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
    db: Session = Depends(get_db),
) -> UserModel:
    token = credentials.credentials if credentials else None
    return AuthService(db).resolve_token(token)


def require(action: Action):
    """Dependency: zalogowany uzytkownik z uprawnieniem do akcji wg polityki."""

    def _guard(user: UserModel = Depends(get_current_user)) -> UserModel:
        authorize(user, action)
        return user

    return _guard


class RateLimit:
    def __init__(self, limiter: RateLimiter, enabled: bool = RATE_LIMIT_ENABLED):
        self.limiter = limiter
        self.enabled = enabled

    def __call__(self, request: Request, client: redis.Redis = Depends(get_redis)) -> None:
        if not self.enabled:
            return
        identifier = request.client.host if request.client else "unknown"
        self.limiter.hit(client, identifier)


api_rate_limit = RateLimit(
    RateLimiter(
        scope="api",
        max_requests=RATE_LIMIT_API_MAX,
        window_seconds=RATE_LIMIT_API_WINDOW_SECONDS,
        message="Too many requests from this IP, please try again after 15 minutes",
    )
)

auth_rate_limit = RateLimit(
    RateLimiter(
        scope="auth",
        max_requests=RATE_LIMIT_AUTH_MAX,
        window_seconds=RATE_LIMIT_AUTH_WINDOW_SECONDS,
        message="Too many login attempts, please try again after an hour",
    )
)
