# kushalwear/services/lock_service.py
import threading
import time
import uuid
from contextlib import contextmanager

import redis
from tenacity import RetryError, Retrying, retry_if_result, stop_after_attempt, wait_exponential

from kushalwear.domain.errors import ConflictError
from kushalwear.utils.retry import redis_retry
from kushalwear.utils.settings import CART_LOCK_BACKEND, CART_LOCK_TTL_SECONDS, REDIS_URL
from kushalwear.utils.logging import get_logger

logger = get_logger(__name__)

#LUA porownaj i usun, atomicity
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""

#redis wykonuje skrypt lua atomowo, nie mozna wcisnac sie miedzy GET a DEL


class BaseLockService:
    """
    -blokada zasobu (np. koszyka) na czas read-modify-write
    -zwalnianie tylko przez wlasciciela
    """

    acquire_attempts = 5

    def acquire(self, key: str, owner: str, ttl: int) -> bool:
        raise NotImplementedError

    def release(self, key: str, owner: str) -> bool:
        raise NotImplementedError

    @contextmanager
    def hold(self, key: str, ttl: int = CART_LOCK_TTL_SECONDS):
        owner = uuid.uuid4().hex
        try:
            for attempt in Retrying(
                stop=stop_after_attempt(self.acquire_attempts),
                wait=wait_exponential(multiplier=0.02, min=0.02, max=0.3),
                retry=retry_if_result(lambda acquired: not acquired),
            ):
                with attempt:
                    acquired = self.acquire(key, owner, ttl)
                if not attempt.retry_state.outcome.failed:
                    attempt.retry_state.set_result(acquired)
        except RetryError:
            logger.warning(f"Could not acquire lock {key}")
            raise ConflictError("Resource is being updated by another request, please retry")

        try:
            yield owner
        finally:
            self.release(key, owner)


class LockService(BaseLockService):
    def __init__(self, url: str | None = None):
        self.redis = redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @redis_retry()
    def acquire(self, key: str, owner: str, ttl: int) -> bool:
        logger.debug(f"Acquire lock {key} for {owner}")
        #SET cart:<user>:lock "<owner>" NX EX ttl
        return bool(self.redis.set(
            name=key,
            value=owner,
            nx=True, #tylko jesli klucz nie istnieje
            ex=ttl, #wygasa sam, nie trzeba recznie czyscic
        ))

    @redis_retry()
    def release(self, key: str, owner: str) -> bool:
        logger.debug(f"Release lock {key} for {owner}")
        res = self.redis.eval(_RELEASE_LUA, 1, key, owner)
        return bool(res)


class LocalLockService(BaseLockService):
    """Ta sama semantyka w jednym procesie (testy, pojedynczy worker)."""

    def __init__(self):
        self._mutex = threading.Lock()
        self._locks: dict[str, tuple[str, float]] = {}

    def acquire(self, key: str, owner: str, ttl: int) -> bool:
        now = time.monotonic()
        with self._mutex:
            current = self._locks.get(key)
            if current and current[1] > now:
                return False
            self._locks[key] = (owner, now + ttl)
            return True

    def release(self, key: str, owner: str) -> bool:
        with self._mutex:
            current = self._locks.get(key)
            if current and current[0] == owner:
                del self._locks[key]
                return True
            return False


def build_lock_service(backend: str | None = None) -> BaseLockService:
    backend = backend or CART_LOCK_BACKEND
    if backend == "local":
        return LocalLockService()
    return LockService()
