import logging
import time
from typing import Callable, TypeVar

from common.utils.helper import describe_exception
from extraction.apis.spotify import SpotifyRateLimitError
from extraction.errors import RetrievalError, RetryLimitExceededError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 20
DEFAULT_EXTRA_WAIT_SECS = 2.0


def perform_rate_limit_aware_request(
    action: Callable[[], T],
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    extra_wait_secs: float = DEFAULT_EXTRA_WAIT_SECS,
) -> T:
    """
    Run `action` and return its result.

    On a 429 the server's Retry-After plus `extra_wait_secs` is slept before
    trying again, for at most `max_attempts` calls in total. Any other error
    is not retried and comes back as a RetrievalError.
    """
    for attempt in range(1, max_attempts + 1):
        try:
            return action()
        except SpotifyRateLimitError as e:
            if attempt == max_attempts:
                break
            wait_secs = e.retry_after + extra_wait_secs
            logger.info(
                f"Got a rate limit response from the api, suggested retry in {e.retry_after}s. "
                f"Sleeping {wait_secs}s (attempt {attempt}/{max_attempts})."
            )
            time.sleep(wait_secs)
        except RetrievalError:
            raise
        except Exception as e:
            raise RetrievalError(f"Spotify api request failed because: {describe_exception(e)}") from e

    raise RetryLimitExceededError(
        f"Could not get data from api. Rate limit exceeded the retry counter of {max_attempts}"
    )
