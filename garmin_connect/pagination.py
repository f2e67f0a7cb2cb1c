"""Offset pagination: fetch fixed-size pages until the service returns an empty one.

Only an empty page ends the loop; a short non-empty page does not. Results
keep server order across page boundaries. Any failure discards what was
accumulated and propagates, so a truncated list is never mistaken for a
complete one.
"""

from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

import structlog

from shared.config import settings
from shared.exceptions import InvalidArgumentError, PaginationLimitError
from shared.metrics import pagination_pages_total

logger = structlog.get_logger()

T = TypeVar("T")

PageFetcher = Callable[[int, int], Awaitable[Sequence[T]]]


async def paginate(
    fetch_page: PageFetcher[T],
    page_size: int | None = None,
    max_pages: int | None = None,
) -> list[T]:
    """Collect every item from *fetch_page(start, limit)*.

    Args:
        fetch_page: Coroutine function returning the items at offset ``start``.
        page_size: Items requested per page (defaults to settings.page_size).
        max_pages: Optional cap on non-empty pages. One more page is requested
            to confirm the listing ended; PaginationLimitError is raised when
            that page still has items. Unbounded when None.

    Returns:
        All items, in server order.
    """
    if page_size is None:
        page_size = settings.page_size
    if max_pages is None:
        max_pages = settings.max_pages
    if page_size < 1:
        raise InvalidArgumentError(f"page_size must be >= 1, got {page_size}")
    if max_pages is not None and max_pages < 1:
        raise InvalidArgumentError(f"max_pages must be >= 1 when set, got {max_pages}")

    items: list[T] = []
    start = 0
    pages = 0
    while True:
        page = await fetch_page(start, page_size)
        pages += 1
        pagination_pages_total.inc()
        if not page:
            break
        if max_pages is not None and pages > max_pages:
            logger.warning("pagination_limit_reached", max_pages=max_pages, collected=len(items))
            raise PaginationLimitError(max_pages, len(items))
        items.extend(page)
        start += page_size

    logger.debug("pagination_complete", pages=pages, items=len(items))
    return items
