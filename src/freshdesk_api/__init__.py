"""Async client for the Freshdesk v2 REST API."""

from .client import FreshdeskClient
from .common import FileAttachment, SortOrder
from .config import FreshdeskConfiguration
from .exceptions import (
    AuthenticationFailureError,
    AuthorizationFailureError,
    ConfigurationError,
    EmptyResponseError,
    FreshdeskApiError,
    FreshdeskError,
    GeneralApiError,
    InvalidRequestError,
    RateLimitError,
    ResourceConflictError,
    ResourceNotFoundError,
)
from .http_client import FreshdeskHttpClient
from .pagination import ListPagination, PageBasedPagination, TokenBasedPagination

__all__ = [
    "AuthenticationFailureError",
    "AuthorizationFailureError",
    "ConfigurationError",
    "EmptyResponseError",
    "FileAttachment",
    "FreshdeskApiError",
    "FreshdeskClient",
    "FreshdeskConfiguration",
    "FreshdeskError",
    "FreshdeskHttpClient",
    "GeneralApiError",
    "InvalidRequestError",
    "ListPagination",
    "PageBasedPagination",
    "RateLimitError",
    "ResourceConflictError",
    "ResourceNotFoundError",
    "SortOrder",
    "TokenBasedPagination",
]
