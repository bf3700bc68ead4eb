from typing import Dict, Optional, Type

import httpx


class FreshdeskError(RuntimeError):
    """Root of every error raised by this library."""


class ConfigurationError(FreshdeskError):
    pass


class EmptyResponseError(FreshdeskError):
    """A successful response carried no usable payload."""


class FreshdeskApiError(FreshdeskError):
    """A Freshdesk API call returned a non-success status.

    The exception owns the raw ``httpx.Response`` so callers can inspect
    headers and body; release it with ``aclose()`` or ``async with``.
    """

    def __init__(self, response: httpx.Response, message: Optional[str] = None):
        self.response = response
        self.status_code = response.status_code
        super().__init__(message or f"Freshdesk API returned HTTP {response.status_code}")

    @property
    def response_message(self) -> str:
        try:
            return self.response.text
        except (httpx.ResponseNotRead, httpx.StreamError, UnicodeDecodeError):
            return ""

    async def aclose(self) -> None:
        await self.response.aclose()

    async def __aenter__(self) -> "FreshdeskApiError":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


class InvalidRequestError(FreshdeskApiError):
    pass


class AuthenticationFailureError(FreshdeskApiError):
    pass


class AuthorizationFailureError(FreshdeskApiError):
    pass


class ResourceNotFoundError(FreshdeskApiError):
    pass


class ResourceConflictError(FreshdeskApiError):
    pass


class GeneralApiError(FreshdeskApiError):
    pass


class RateLimitError(GeneralApiError):
    """429 that could not be retried."""

    def __init__(self, response: httpx.Response, retry_after: Optional[float] = None, message: Optional[str] = None):
        self.retry_after = retry_after
        super().__init__(response, message or "Freshdesk API rate limit exceeded")


_STATUS_EXCEPTIONS: Dict[int, Type[FreshdeskApiError]] = {
    400: InvalidRequestError,
    401: AuthenticationFailureError,
    403: AuthorizationFailureError,
    404: ResourceNotFoundError,
    409: ResourceConflictError,
}


def create_api_exception(response: httpx.Response) -> FreshdeskApiError:
    exc_type = _STATUS_EXCEPTIONS.get(response.status_code, GeneralApiError)
    return exc_type(response)
