# storefront/utils/retry.py
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type
import redis
from sqlalchemy.exc import SQLAlchemyError

from storefront.domain.exceptions import RemoteStoreError
from storefront.utils.settings import SYNC_MAX_ATTEMPTS


def redis_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type(redis.RedisError),
    )


def sync_retry(attempts: int | None = None):
    #domyslnie 1 proba = brak retry, backoff wlaczany samym ustawieniem
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts or SYNC_MAX_ATTEMPTS),
        wait=wait_exponential(multiplier=0.3, min=0.3, max=3),
        retry=retry_if_exception_type((SQLAlchemyError, RemoteStoreError)),
    )
