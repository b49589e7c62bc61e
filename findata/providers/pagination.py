"""Backward-in-time pagination shared by the insider-trade and news endpoints."""

from typing import Callable, List, Optional, TypeVar

from findata.core.logger import logger

T = TypeVar("T")


def date_part(value: str) -> str:
    """Strip any time-of-day suffix: ``"2024-03-01T10:00:00Z"`` → ``"2024-03-01"``."""
    return value.split("T", 1)[0]


def paginate_backward(
    fetch_page: Callable[[str], List[T]],
    end_date: str,
    start_date: Optional[str],
    limit: int,
    date_of: Callable[[T], str],
) -> List[T]:
    """
    Collect every record between ``start_date`` and ``end_date``, newest page first.

    With a ``start_date`` the walk asks for pages ending at a cursor that starts at
    ``end_date`` and moves to the oldest date seen on each page. It stops when a page
    is empty, when a page is shorter than ``limit``, or once the cursor reaches
    ``start_date``. Without a ``start_date`` exactly one page is fetched.

    Records sharing the boundary date may come back on two consecutive pages; they
    are kept as-is, in fetch order.

    Args:
        fetch_page (Callable[[str], List[T]]): Fetches one page ending at the given date.
        end_date (str): Newest date to include, ``YYYY-MM-DD``.
        start_date (Optional[str]): Oldest date to include, or ``None`` for one page.
        limit (int): Page size requested from the server.
        date_of (Callable[[T], str]): Returns the date a record is ordered by.

    Returns:
        List[T]: All fetched records in page order.
    """
    collected: List[T] = []
    cursor = end_date

    while True:
        page = fetch_page(cursor)
        if not page:
            break

        collected.extend(page)

        if start_date is None or len(page) < limit:
            break

        next_cursor = date_part(min(date_of(record) for record in page))
        logger.debug(f"Page of {len(page)} records; moving end cursor {cursor} → {next_cursor}")

        if next_cursor >= cursor:
            logger.warning(
                f"Pagination cursor did not move back from {cursor}; "
                f"stopping after {len(collected)} records"
            )
            break
        cursor = next_cursor

        if cursor <= start_date:
            break

    return collected
