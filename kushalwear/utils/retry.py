# kushalwear/utils/retry.py
from tenacity import (
    Retrying,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
import redis


def redis_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type(redis.RedisError),
    )


def conflict_retrying(exc_type, attempts: int = 3, wait=None) -> Retrying:
    """
    Retrying dla operacji read-modify-write: powtarza cala operacje
    (ponowny odczyt + zapis) gdy zapis przegral wyscig z inna operacja.
    """
    return Retrying(
        reraise=True,
        stop=stop_after_attempt(attempts),
        wait=wait if wait is not None else wait_exponential(multiplier=0.05, min=0.05, max=0.5),
        retry=retry_if_exception_type(exc_type),
    )
