# storefront/services/rate_limiter.py
import redis

from storefront.domain.errors import RateLimitError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class RateLimiter:
    """
    Limit zapytan w stalym oknie czasowym, licznik w redisie per klucz (IP).

    SET key 0 NX EX window -> pierwszy request otwiera okno
    INCR key               -> licznik w oknie
    oba w jednej transakcji MULTI/EXEC
    """

    def __init__(self, scope: str, max_requests: int, window_seconds: int, message: str):
        self.scope = scope
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.message = message

    def key_for(self, identifier: str) -> str:
        return f"ratelimit:{self.scope}:{identifier}"

    def hit(self, client: redis.Redis, identifier: str) -> int:
        key = self.key_for(identifier)

        pipe = client.pipeline(transaction=True)
        pipe.set(key, 0, nx=True, ex=self.window_seconds)
        pipe.incr(key)
        _, count = pipe.execute()

        if count > self.max_requests:
            logger.warning(f"Rate limit {self.scope} exceeded for {identifier} ({count}/{self.max_requests})")
            raise RateLimitError(self.message)

        return count
