# storefront/utils/retry.py
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type
import redis

from storefront.domain.errors import ConcurrencyConflict
from storefront.utils.settings import REVIEW_CAS_ATTEMPTS


def redis_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type(redis.RedisError),
    )


def cas_retry():
    # re-run a read-modify-write that lost a version compare-and-swap
    return retry(
        reraise=True,
        stop=stop_after_attempt(REVIEW_CAS_ATTEMPTS),
        wait=wait_exponential(multiplier=0.01, min=0.01, max=0.1),
        retry=retry_if_exception_type(ConcurrencyConflict),
    )
