import asyncio
import logging
from functools import lru_cache
from importlib.metadata import PackageNotFoundError, version as pkg_version
from typing import Any, AsyncIterator, Dict, Optional

import httpx
from pydantic import BaseModel, TypeAdapter

from .common import build_url
from .config import FreshdeskConfiguration
from .exceptions import ConfigurationError, EmptyResponseError, RateLimitError, create_api_exception
from .pagination import ListPagination, Pagination

logger = logging.getLogger(__name__)

# Version info for UA
try:
    PACKAGE_VERSION = pkg_version("freshdesk-api")
except PackageNotFoundError:
    PACKAGE_VERSION = "dev"

USER_AGENT = f"freshdesk-api/{PACKAGE_VERSION}"


async def _async_sleep(seconds: float) -> None:
    # Module-level so tests can record waits instead of sleeping
    await asyncio.sleep(seconds)


@lru_cache(maxsize=None)
def _adapter(model: Any) -> TypeAdapter:
    return TypeAdapter(model)


def _parse(model: Any, data: Any) -> Any:
    if model is None:
        return data
    return _adapter(model).validate_python(data)


def _retry_after_seconds(response: httpx.Response) -> Optional[float]:
    """Delta-seconds from Retry-After, or None when absent or not a number."""
    value = response.headers.get("Retry-After")
    if value is None:
        return None
    value = value.strip()
    if not value.isdigit():
        return None
    return float(value)


def _single_int_header(response: httpx.Response, name: str) -> Optional[int]:
    values = response.headers.get_list(name)
    if len(values) != 1:
        return None
    try:
        return int(values[0].strip())
    except ValueError:
        return None


def _encode_body(body: Any) -> Dict[str, Any]:
    if body is None:
        return {}
    multipart_required = getattr(body, "is_multipart_form_data_required", None)
    if callable(multipart_required) and multipart_required():
        data, files = body.to_multipart()
        return {"data": data, "files": files}
    if isinstance(body, BaseModel):
        return {"json": body.model_dump(mode="json", exclude_none=True)}
    return {"json": body}


def _raise_if_cancelled(cancel_event: Optional[asyncio.Event]) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise asyncio.CancelledError("Paged fetch cancelled")


class FreshdeskHttpClient:
    """Executes Freshdesk API calls over a shared ``httpx.AsyncClient``.

    Handles Basic auth, JSON or multipart bodies, 429 back-off driven by
    ``Retry-After``, status-to-exception mapping and paged iteration. The
    last seen ``X-RateLimit-*`` headers are kept on the instance.
    """

    def __init__(
        self,
        configuration: Optional[FreshdeskConfiguration] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
        max_rate_limit_retries: Optional[int] = None,
    ):
        if configuration is None and client is None:
            raise ConfigurationError("Either a FreshdeskConfiguration or an httpx.AsyncClient is required")
        if client is not None and not str(client.base_url):
            raise ConfigurationError("The httpx client must have a base_url set")
        if max_rate_limit_retries is not None and max_rate_limit_retries < 0:
            raise ValueError("max_rate_limit_retries must not be negative")
        self.configuration = configuration
        self.max_rate_limit_retries = max_rate_limit_retries
        self._client = client
        self._owns_client = client is None
        if client is not None and configuration is not None:
            client.headers.update(self._default_headers())
        self._rate_limit_total = -1
        self._rate_limit_remaining = -1

    @classmethod
    def create(cls, freshdesk_domain: str, api_key: str, **kwargs: Any) -> "FreshdeskHttpClient":
        return cls(FreshdeskConfiguration(freshdesk_domain=freshdesk_domain, api_key=api_key), **kwargs)

    @property
    def rate_limit_total(self) -> int:
        return self._rate_limit_total

    @property
    def rate_limit_remaining(self) -> int:
        return self._rate_limit_remaining

    def _default_headers(self) -> Dict[str, str]:
        return {
            "Authorization": self.configuration.auth_header,
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
        }

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            config = self.configuration
            self._client = httpx.AsyncClient(
                base_url=config.freshdesk_domain,
                headers=self._default_headers(),
                timeout=httpx.Timeout(config.timeout, connect=config.connect_timeout),
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "FreshdeskHttpClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def _set_rate_limit_values(self, response: httpx.Response) -> None:
        total = _single_int_header(response, "X-RateLimit-Total")
        if total is not None:
            self._rate_limit_total = total
        remaining = _single_int_header(response, "X-RateLimit-Remaining")
        if remaining is not None:
            self._rate_limit_remaining = remaining

    async def _send(self, method: str, url: str, *, body: Any = None) -> httpx.Response:
        client = self._get_client()
        content = _encode_body(body)
        retries = 0
        while True:
            logger.debug("%s %s", method, url)
            response = await client.request(method, url, **content)
            self._set_rate_limit_values(response)
            if response.status_code != 429:
                break
            retry_after = _retry_after_seconds(response)
            if retry_after is None:
                raise RateLimitError(response, None, "Rate limited without a Retry-After delay")
            if self.max_rate_limit_retries is not None and retries >= self.max_rate_limit_retries:
                raise RateLimitError(response, retry_after)
            logger.warning("Rate limited on %s %s, retrying in %.0fs", method, url, retry_after)
            # This response is replaced by the retried one
            await response.aclose()
            await _async_sleep(retry_after)
            retries += 1
        if not response.is_success:
            raise create_api_exception(response)
        return response

    async def api_operation(
        self,
        method: str,
        url: str,
        body: Any = None,
        *,
        model: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Perform one non-paged API call.

        Args:
            method: HTTP method
            url: Path relative to the Freshdesk domain, e.g. ``/api/v2/tickets/1``
            body: Request DTO, dict or list; sent as multipart when it
                reports attachments, otherwise as JSON
            model: Type to validate the JSON response into; raw JSON when None
            params: Extra query parameters, unset values dropped

        Returns:
            The validated response, or None for 204/empty responses
        """
        response = await self._send(method, build_url(url, params), body=body)
        if response.status_code == 204 or not response.content:
            return None
        data = response.json()
        if data is None and model is not None:
            raise EmptyResponseError(f"{method} {url} returned an empty payload")
        return _parse(model, data)

    async def get_paged_results(
        self,
        url: str,
        pagination: Optional[Pagination] = None,
        model: Any = None,
        *,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> AsyncIterator[Any]:
        """Lazily iterate every item of a paged collection.

        Pages are fetched one at a time and fully yielded before the next is
        requested. Setting ``cancel_event`` stops iteration with
        ``asyncio.CancelledError`` before the next fetch or the next item.
        """
        pagination = pagination if pagination is not None else ListPagination()
        current_url = build_url(url, pagination.initial_params())
        page_number = 1
        while True:
            _raise_if_cancelled(cancel_event)
            response = await self._send("GET", current_url)
            payload = response.json() if response.content else None
            page = pagination.read_page(payload, response.headers)
            logger.debug("Fetched page %d of %s with %d items", page_number, url, len(page.items))

            if pagination.before_page is not None:
                await pagination.before_page(page_number, current_url)
            for item in page.items:
                _raise_if_cancelled(cancel_event)
                yield _parse(model, item)
            if pagination.after_page is not None:
                await pagination.after_page(page_number, current_url)

            next_url = pagination.next_url(url, page_number, page)
            if next_url is None:
                return
            current_url = next_url
            page_number += 1
