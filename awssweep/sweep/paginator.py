"""Page cursor over paginated listing APIs.

Hides the backend continuation token behind a has_more()/next() pair so that
discovery loops read the same for every resource kind.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)

# fetch_page(token) -> (items, next_token)
FetchPage = Callable[[Optional[str]], Tuple[List[Any], Optional[str]]]


class PageCursorExhaustedError(RuntimeError):
    """next() was called after the cursor ran out of pages."""


class PageCursor:
    """Sequential cursor over a paginated listing.

    Pages are fetched strictly in order since each request needs the token
    returned by the previous one. After a fetch error the cursor is exhausted.

    Attributes:
        pages_fetched: Number of successful page fetches so far
    """

    def __init__(self, fetch_page: FetchPage) -> None:
        """Initialize page cursor.

        Args:
            fetch_page: Callable taking the continuation token (None for the
                first page) and returning (items, next_token)
        """
        self._fetch_page = fetch_page
        self._next_token: Optional[str] = None
        self._first_page = True
        self._exhausted = False
        self.pages_fetched = 0

    def has_more(self) -> bool:
        """Check whether another page can be fetched."""
        if self._exhausted:
            return False
        return self._first_page or bool(self._next_token)

    def next(self) -> list[Any]:
        """Fetch the next page of items.

        Returns:
            Items on the page (possibly empty)

        Raises:
            PageCursorExhaustedError: If no pages remain
            Exception: Whatever the backend raised; the cursor is then exhausted
        """
        if not self.has_more():
            raise PageCursorExhaustedError("no more pages to fetch")

        try:
            items, next_token = self._fetch_page(self._next_token)
        except Exception:
            self._exhausted = True
            raise

        self._first_page = False
        self._next_token = next_token or None
        self.pages_fetched += 1
        return list(items)


def boto_page_cursor(
    client: Any,
    operation: str,
    result_key: str,
    token_key: str = "NextToken",
    **params: Any,
) -> PageCursor:
    """Build a cursor over a boto3 list operation.

    Args:
        client: boto3 service client
        operation: Client method name (e.g., "list_access_points")
        result_key: Response key holding the listed items
        token_key: Request/response key holding the continuation token
        **params: Static request parameters

    Returns:
        PageCursor over the operation
    """
    method = getattr(client, operation)

    def fetch_page(token: Optional[str]) -> tuple[list[Any], Optional[str]]:
        request = dict(params)
        if token:
            request[token_key] = token

        response = method(**request)
        items = response.get(result_key, [])
        logger.debug(f"{operation} returned {len(items)} items")
        return items, response.get(token_key)

    return PageCursor(fetch_page)
