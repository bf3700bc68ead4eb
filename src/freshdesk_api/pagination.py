"""Pagination strategies for Freshdesk list endpoints.

Freshdesk pages its collections in three different ways:

* page numbers (``page``/``per_page``), capped at 10 pages on search
  endpoints, with the payload either a bare array or ``{total, results}``;
* a bare array plus a ``Link`` header pointing at the next page;
* an opaque ``next_token`` taken from ``_links.next.href`` in the body
  (custom object records).

Each strategy below builds the first request's parameters, reads one page
out of a response, and decides where the next page lives. The loop that
drives them is ``FreshdeskHttpClient.get_paged_results``.
"""

import re
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Mapping, NamedTuple, Optional, Union
from urllib.parse import parse_qs, urlsplit

from .common import build_url

CUSTOM_OBJECTS_PREFIX = "/api/v2/custom_objects"

# Freshdesk refuses page numbers above 10 on the endpoints that page this way
MAX_PAGES = 10

_LINK_URL = re.compile(r"<([^>]*)>")

PageHook = Callable[[int, str], Awaitable[None]]


class Page(NamedTuple):
    items: List[Any]
    link: Optional[str] = None


def parse_link_header(link_header: Optional[str]) -> Optional[str]:
    """Return the first ``<url>`` found in a Link header.

    Args:
        link_header: Raw value of the ``Link`` response header

    Returns:
        The URL, or None when the header is empty or has no ``<...>`` part
    """
    if not link_header:
        return None
    match = _LINK_URL.search(link_header)
    if not match:
        return None
    url = match.group(1).strip()
    return url or None


def _items(payload: Any, key: str) -> List[Any]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        return list(payload.get(key) or [])
    return []


@dataclass
class PageBasedPagination:
    starting_page: int = 1
    page_size: Optional[int] = None
    max_pages: int = MAX_PAGES
    before_page: Optional[PageHook] = None
    after_page: Optional[PageHook] = None

    def __post_init__(self) -> None:
        if self.starting_page < 1:
            raise ValueError("starting_page must be 1 or greater")
        if self.page_size is not None and self.page_size < 1:
            raise ValueError("page_size must be 1 or greater")
        self.max_pages = max(1, min(self.max_pages, MAX_PAGES))

    def _params(self, page: int) -> Dict[str, Any]:
        return {"page": page, "per_page": self.page_size}

    def initial_params(self) -> Dict[str, Any]:
        return self._params(self.starting_page)

    def read_page(self, payload: Any, headers: Mapping[str, str]) -> Page:
        return Page(_items(payload, "results"), parse_link_header(headers.get("link")))

    def next_url(self, initial_url: str, page_number: int, page: Page) -> Optional[str]:
        if not page.items:
            return None
        if self.page_size is not None and len(page.items) < self.page_size:
            return None
        next_page = self.starting_page + page_number
        if next_page > self.max_pages:
            return None
        return build_url(initial_url, self._params(next_page))


@dataclass
class ListPagination:
    page_size: Optional[int] = None
    before_page: Optional[PageHook] = None
    after_page: Optional[PageHook] = None

    def initial_params(self) -> Dict[str, Any]:
        return {"per_page": self.page_size}

    def read_page(self, payload: Any, headers: Mapping[str, str]) -> Page:
        return Page(_items(payload, "results"), parse_link_header(headers.get("link")))

    def next_url(self, initial_url: str, page_number: int, page: Page) -> Optional[str]:
        # The Link header already carries every query parameter
        return page.link


@dataclass
class TokenBasedPagination:
    starting_token: Optional[str] = None
    page_size: Optional[int] = None
    before_page: Optional[PageHook] = None
    after_page: Optional[PageHook] = None

    def _params(self, token: Optional[str]) -> Dict[str, Any]:
        return {"next_token": token, "page_size": self.page_size}

    def initial_params(self) -> Dict[str, Any]:
        return self._params(self.starting_token)

    def read_page(self, payload: Any, headers: Mapping[str, str]) -> Page:
        href = None
        if isinstance(payload, dict):
            href = ((payload.get("_links") or {}).get("next") or {}).get("href")
        link = f"{CUSTOM_OBJECTS_PREFIX}{href}" if href else parse_link_header(headers.get("link"))
        return Page(_items(payload, "records"), link)

    def next_url(self, initial_url: str, page_number: int, page: Page) -> Optional[str]:
        if not page.link:
            return None
        tokens = parse_qs(urlsplit(page.link).query).get("next_token")
        if not tokens or not tokens[0]:
            return None
        return build_url(initial_url, self._params(tokens[0]))


Pagination = Union[PageBasedPagination, ListPagination, TokenBasedPagination]

# Plain collection endpoints accept page numbers or Link-header following
LIST_STRATEGIES = (ListPagination, PageBasedPagination)


def check_pagination(pagination: Optional[Pagination], *allowed: type) -> None:
    """Reject a pagination strategy the endpoint does not speak."""
    if pagination is not None and not isinstance(pagination, allowed):
        expected = " or ".join(t.__name__ for t in allowed)
        raise ValueError(
            f"{type(pagination).__name__} cannot be used with this endpoint; pass {expected}"
        )
