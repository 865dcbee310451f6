import logging
import math
from typing import Any, Callable

from extraction.apis.rate_limit import (
    DEFAULT_EXTRA_WAIT_SECS,
    DEFAULT_MAX_ATTEMPTS,
    perform_rate_limit_aware_request,
)

logger = logging.getLogger(__name__)


def _page_ceiling(first_page: dict) -> int | None:
    total = first_page.get("total")
    limit = first_page.get("limit")
    if not total or not limit:
        return None
    return math.ceil(total / limit) + 1


def collect_all(
    first_page: dict,
    fetch_page: Callable[[str], dict],
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    extra_wait_secs: float = DEFAULT_EXTRA_WAIT_SECS,
) -> list[Any]:
    """
    Drain a Spotify paging object into one list, keeping page and item order.
    `fetch_page(next_url)` returns the next paging object; every call is
    wrapped by the rate-limit aware executor.
    """
    items: list[Any] = list(first_page.get("items") or [])
    total = first_page.get("total")
    ceiling = _page_ceiling(first_page)

    page = first_page
    pages = 1
    while page.get("next"):
        if total is not None and len(items) >= total:
            break
        if ceiling is not None and pages >= ceiling:
            logger.warning(
                f"Stopped paginating after {pages} pages ({len(items)}/{total} items); "
                "server kept returning a next link."
            )
            break

        next_url = page["next"]
        page = perform_rate_limit_aware_request(
            lambda: fetch_page(next_url),
            max_attempts=max_attempts,
            extra_wait_secs=extra_wait_secs,
        )
        pages += 1

        page_items = page.get("items") or []
        if not page_items:
            break
        items.extend(page_items)

    logger.debug(f"Collected {len(items)} items over {pages} page(s)")
    return items
