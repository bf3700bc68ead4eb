import logging
from typing import Annotated, Any, Dict, List, Optional

import httpx
from mcp.server.fastmcp import FastMCP
from pydantic import Field

from .client import FreshdeskClient
from .config import FreshdeskConfiguration
from .contacts import ListAllContactsRequest
from .exceptions import ConfigurationError, FreshdeskApiError, FreshdeskError, InvalidRequestError
from .http_client import PACKAGE_VERSION
from .pagination import PageBasedPagination

logger = logging.getLogger(__name__)

##
# Initialize FastMCP server
##
mcp = FastMCP("freshdesk-api")

# Shared API client (lazily initialized from the environment)
_client: Optional[FreshdeskClient] = None


def _get_client() -> FreshdeskClient:
    global _client
    if _client is None:
        _client = FreshdeskClient.from_env()
    return _client


def _ok(data: Any, *, pagination: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    out: Dict[str, Any] = {"success": True, "data": data}
    if pagination is not None:
        out["pagination"] = pagination
    return out


def _err(err_type: str, message: str, *, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "success": False,
        "error": {
            "type": err_type,
            "message": message,
        }
    }
    if details:
        out["error"]["details"] = details
    return out


def _failure(message: str, exc: Exception, **details: Any) -> Dict[str, Any]:
    """Map a library or transport error onto the error envelope."""
    if isinstance(exc, InvalidRequestError):
        return _err("validation_error", message, details={"status": exc.status_code, "body": exc.response_message, **details})
    if isinstance(exc, FreshdeskApiError):
        return _err("http_error", message, details={"status": exc.status_code, **details})
    if isinstance(exc, ConfigurationError):
        return _err("configuration_error", str(exc))
    if isinstance(exc, httpx.RequestError):
        return _err("network_error", f"{message}: {exc}", details=details or None)
    return _err("unexpected_error", f"{message}: {exc}", details=details or None)


def _dump(model: Any) -> Dict[str, Any]:
    return model.model_dump(mode="json", exclude_none=True)


@mcp.tool("server.info")
async def get_server_info() -> Dict[str, Any]:
    """
    Health/version endpoint for clients and operators.
    Reports readiness and basic configuration metadata (non-secret).
    """
    try:
        domain: Optional[str] = FreshdeskConfiguration.from_env().freshdesk_domain
    except ConfigurationError:
        domain = None
    return _ok({
        "name": "freshdesk-api",
        "version": PACKAGE_VERSION,
        "freshdesk_domain": domain,
        "ready": domain is not None,
        "rate_limit": {
            "total": _client.rate_limit_total if _client else -1,
            "remaining": _client.rate_limit_remaining if _client else -1,
        },
    })


@mcp.tool("contacts.list")
async def contacts_list(
    email: Optional[str] = None,
    phone: Optional[str] = None,
    page: Annotated[int, Field(ge=1, le=10, description="Starting page number")] = 1,
    per_page: Annotated[int, Field(ge=1, le=100, description="Items per page")] = 30,
    max_items: Annotated[int, Field(ge=1, le=1000, description="Stop after this many contacts")] = 100,
) -> Dict[str, Any]:
    """List contacts, optionally filtered by email or phone."""
    request = ListAllContactsRequest(email=email, phone=phone)
    pagination = PageBasedPagination(starting_page=page, page_size=per_page)
    contacts: List[Dict[str, Any]] = []
    truncated = False
    try:
        async for contact in _get_client().contacts.list_all(request, pagination):
            if len(contacts) >= max_items:
                truncated = True
                break
            logger.info("Contact: %s", contact.name)
            contacts.append(_dump(contact))
    except InvalidRequestError as e:
        logger.error("Freshdesk rejected the contact listing: %s", e.response_message)
        return _failure("Failed to list contacts", e)
    except (FreshdeskError, httpx.RequestError) as e:
        return _failure("Failed to list contacts", e)
    return _ok({"contacts": contacts}, pagination={
        "starting_page": page,
        "per_page": per_page,
        "returned": len(contacts),
        "truncated": truncated,
    })


@mcp.tool("tickets.list")
async def tickets_list(
    page: Annotated[int, Field(ge=1, le=10, description="Starting page number")] = 1,
    per_page: Annotated[int, Field(ge=1, le=100, description="Items per page")] = 30,
    max_items: Annotated[int, Field(ge=1, le=1000, description="Stop after this many tickets")] = 100,
) -> Dict[str, Any]:
    """List tickets across pages."""
    pagination = PageBasedPagination(starting_page=page, page_size=per_page)
    tickets: List[Dict[str, Any]] = []
    truncated = False
    try:
        async for ticket in _get_client().tickets.list_all(pagination=pagination):
            if len(tickets) >= max_items:
                truncated = True
                break
            tickets.append(_dump(ticket))
    except (FreshdeskError, httpx.RequestError) as e:
        return _failure("Failed to fetch tickets", e)
    return _ok({"tickets": tickets}, pagination={
        "starting_page": page,
        "per_page": per_page,
        "returned": len(tickets),
        "truncated": truncated,
    })


@mcp.tool("tickets.get")
async def tickets_get(ticket_id: int) -> Dict[str, Any]:
    """Get a ticket in Freshdesk."""
    try:
        ticket = await _get_client().tickets.view(ticket_id)
    except (FreshdeskError, httpx.RequestError) as e:
        return _failure("Failed to fetch ticket", e, ticket_id=ticket_id)
    return _ok(_dump(ticket))


@mcp.tool("companies.get")
async def companies_get(company_id: int) -> Dict[str, Any]:
    """Get a company in Freshdesk."""
    try:
        company = await _get_client().companies.view(company_id)
    except (FreshdeskError, httpx.RequestError) as e:
        return _failure("Failed to fetch company", e, company_id=company_id)
    return _ok(_dump(company))


@mcp.tool("agents.me")
async def agents_me() -> Dict[str, Any]:
    """Get the agent that owns the configured API key."""
    try:
        agent = await _get_client().me.view()
    except (FreshdeskError, httpx.RequestError) as e:
        return _failure("Failed to fetch current agent", e)
    return _ok(_dump(agent))


def main():
    logging.basicConfig(level=logging.INFO)
    logging.info("Starting Freshdesk MCP server")
    try:
        FreshdeskConfiguration.from_env()
    except ConfigurationError as e:
        logging.error(f"Configuration error: {e}")
        raise
    logging.info("Freshdesk MCP server ready")
    mcp.run(transport='stdio')


if __name__ == "__main__":
    main()
