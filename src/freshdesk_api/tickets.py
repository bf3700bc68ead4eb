from dataclasses import dataclass
from datetime import datetime
from enum import Enum, IntEnum
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence

from pydantic import BaseModel, Field, model_validator

from .common import Attachment, AttachmentRequest, FileAttachment, SortOrder, build_url
from .conversations import ConversationEntry
from .http_client import FreshdeskHttpClient
from .pagination import LIST_STRATEGIES, PageBasedPagination, Pagination, check_pagination


# enums of ticket properties
class TicketSource(IntEnum):
    EMAIL = 1
    PORTAL = 2
    PHONE = 3
    CHAT = 7
    MOBIHELP = 8
    FEEDBACK_WIDGET = 9
    OUTBOUND_EMAIL = 10

class TicketStatus(IntEnum):
    OPEN = 2
    PENDING = 3
    RESOLVED = 4
    CLOSED = 5

class TicketPriority(IntEnum):
    LOW = 1
    MEDIUM = 2
    HIGH = 3
    URGENT = 4

class TicketAssociationType(IntEnum):
    PARENT = 1
    CHILD = 2
    TRACKER = 3
    RELATED = 4

class ListAllTicketsFilter(str, Enum):
    NEW_AND_MY_OPEN = "new_and_my_open"
    WATCHING = "watching"
    SPAM = "spam"
    DELETED = "deleted"

class TicketOrderBy(str, Enum):
    CREATED_AT = "created_at"
    DUE_BY = "due_by"
    UPDATED_AT = "updated_at"
    STATUS = "status"

class TicketIncludes(str, Enum):
    COMPANY = "company"
    CONVERSATIONS = "conversations"
    DESCRIPTION = "description"
    REQUESTER = "requester"
    STATS = "stats"


class Requester(BaseModel):
    id: Optional[int] = None
    name: Optional[str] = None
    email: Optional[str] = None
    mobile: Optional[str] = None
    phone: Optional[str] = None


class TicketCompany(BaseModel):
    id: Optional[int] = None
    name: Optional[str] = None


class TicketStats(BaseModel):
    agent_responded_at: Optional[datetime] = None
    requester_responded_at: Optional[datetime] = None
    first_responded_at: Optional[datetime] = None
    status_updated_at: Optional[datetime] = None
    reopened_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None
    pending_since: Optional[datetime] = None


class Ticket(BaseModel):
    id: Optional[int] = None
    subject: Optional[str] = None
    type: Optional[str] = None
    description: Optional[str] = None
    description_text: Optional[str] = None
    # custom statuses are numbered from 6 upwards, so these stay plain ints
    status: Optional[int] = None
    priority: Optional[int] = None
    source: Optional[int] = None
    requester_id: Optional[int] = None
    responder_id: Optional[int] = None
    company_id: Optional[int] = None
    group_id: Optional[int] = None
    product_id: Optional[int] = None
    email_config_id: Optional[int] = None
    association_type: Optional[int] = None
    associated_tickets_list: Optional[List[int]] = None
    cc_emails: Optional[List[str]] = None
    fwd_emails: Optional[List[str]] = None
    reply_cc_emails: Optional[List[str]] = None
    ticket_cc_emails: Optional[List[str]] = None
    to_emails: Optional[List[str]] = None
    fr_escalated: Optional[bool] = None
    is_escalated: Optional[bool] = None
    spam: Optional[bool] = None
    deleted: Optional[bool] = None
    due_by: Optional[datetime] = None
    fr_due_by: Optional[datetime] = None
    custom_fields: Optional[Dict[str, Any]] = None
    tags: Optional[List[str]] = None
    attachments: Optional[List[Attachment]] = None
    source_additional_info: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    stats: Optional[TicketStats] = None
    requester: Optional[Requester] = None
    company: Optional[TicketCompany] = None
    conversations: Optional[List[ConversationEntry]] = None


class TimeEntry(BaseModel):
    id: Optional[int] = None
    agent_id: Optional[int] = None
    ticket_id: Optional[int] = None
    billable: Optional[bool] = None
    note: Optional[str] = None
    timer_running: Optional[bool] = None
    time_spent: Optional[str] = None
    executed_at: Optional[datetime] = None
    start_time: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SatisfactionRating(BaseModel):
    id: Optional[int] = None
    survey_id: Optional[int] = None
    user_id: Optional[int] = None
    agent_id: Optional[int] = None
    group_id: Optional[int] = None
    ticket_id: Optional[int] = None
    feedback: Optional[str] = None
    ratings: Optional[Dict[str, int]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TicketSummary(BaseModel):
    id: Optional[int] = None
    ticket_id: Optional[int] = None
    user_id: Optional[int] = None
    body: Optional[str] = None
    body_text: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class _TicketFields(AttachmentRequest):
    name: Optional[str] = None
    requester_id: Optional[int] = None
    email: Optional[str] = None
    facebook_id: Optional[str] = None
    phone: Optional[str] = None
    twitter_id: Optional[str] = None
    unique_external_id: Optional[str] = None
    subject: Optional[str] = None
    type: Optional[str] = None
    description: Optional[str] = Field(None, description="HTML content of the ticket")
    responder_id: Optional[int] = None
    cc_emails: Optional[List[str]] = None
    custom_fields: Optional[Dict[str, Any]] = None
    due_by: Optional[datetime] = None
    fr_due_by: Optional[datetime] = None
    email_config_id: Optional[int] = None
    group_id: Optional[int] = None
    product_id: Optional[int] = None
    company_id: Optional[int] = None
    tags: Optional[List[str]] = None
    internal_agent_id: Optional[int] = None
    internal_group_id: Optional[int] = None
    attachments: Optional[List[FileAttachment]] = None


_REQUESTER_FIELDS = ("requester_id", "email", "phone", "twitter_id", "facebook_id", "unique_external_id")


class CreateTicketRequest(_TicketFields):
    status: TicketStatus
    priority: TicketPriority
    source: TicketSource
    description: str = Field(..., description="HTML content of the ticket")
    parent_id: Optional[int] = None

    @model_validator(mode="after")
    def _requires_requester(self) -> "CreateTicketRequest":
        if not any(getattr(self, name) for name in _REQUESTER_FIELDS):
            raise ValueError(f"One of {', '.join(_REQUESTER_FIELDS)} must be provided")
        return self


class CreateOutboundEmailRequest(_TicketFields):
    email: str
    email_config_id: int
    subject: str
    description: str
    status: TicketStatus = TicketStatus.CLOSED
    priority: TicketPriority = TicketPriority.LOW


class UpdateTicketRequest(_TicketFields):
    status: Optional[TicketStatus] = None
    priority: Optional[TicketPriority] = None
    source: Optional[TicketSource] = None
    parent_id: Optional[int] = None


@dataclass
class ListAllTicketsRequest:
    filter: Optional[ListAllTicketsFilter] = None
    requester_id: Optional[int] = None
    email: Optional[str] = None
    company_id: Optional[int] = None
    updated_since: Optional[datetime] = None
    order_by: Optional[TicketOrderBy] = None
    order_type: Optional[SortOrder] = None
    includes: Optional[Sequence[TicketIncludes]] = None

    @property
    def url(self) -> str:
        return build_url("/api/v2/tickets", {
            "filter": self.filter,
            "requester_id": self.requester_id,
            "email": self.email,
            "company_id": self.company_id,
            "updated_since": self.updated_since,
            "order_by": self.order_by,
            "order_type": self.order_type,
            "include": self.includes or None,
        })


def search_query(query: str) -> str:
    """Freshdesk search queries must be wrapped in double quotes."""
    query = query.strip()
    if query.startswith('"') and query.endswith('"') and len(query) > 1:
        return query
    return f'"{query}"'


class TicketsClient:
    def __init__(self, http: FreshdeskHttpClient):
        self._http = http

    async def view(self, ticket_id: int, includes: Optional[Sequence[TicketIncludes]] = None) -> Ticket:
        return await self._http.api_operation(
            "GET", f"/api/v2/tickets/{ticket_id}", model=Ticket, params={"include": includes or None}
        )

    def list_all(
        self,
        request: Optional[ListAllTicketsRequest] = None,
        pagination: Optional[Pagination] = None,
    ) -> AsyncIterator[Ticket]:
        check_pagination(pagination, *LIST_STRATEGIES)
        request = request or ListAllTicketsRequest()
        return self._http.get_paged_results(request.url, pagination, Ticket)

    def filter(self, query: str, pagination: Optional[PageBasedPagination] = None) -> AsyncIterator[Ticket]:
        """Search tickets with Freshdesk's filter query language, e.g. ``priority:3 AND status:2``.

        Freshdesk serves at most 10 pages of 30 results for a filter query.
        """
        check_pagination(pagination, PageBasedPagination)
        url = build_url("/api/v2/search/tickets", {"query": search_query(query)})
        return self._http.get_paged_results(url, pagination or PageBasedPagination(), Ticket)

    async def create(self, request: CreateTicketRequest) -> Ticket:
        return await self._http.api_operation("POST", "/api/v2/tickets", request, model=Ticket)

    async def create_outbound_email(self, request: CreateOutboundEmailRequest) -> Ticket:
        return await self._http.api_operation("POST", "/api/v2/tickets/outbound_email", request, model=Ticket)

    async def update(self, ticket_id: int, request: UpdateTicketRequest) -> Ticket:
        return await self._http.api_operation("PUT", f"/api/v2/tickets/{ticket_id}", request, model=Ticket)

    async def delete(self, ticket_id: int) -> None:
        await self._http.api_operation("DELETE", f"/api/v2/tickets/{ticket_id}")

    async def restore(self, ticket_id: int) -> None:
        await self._http.api_operation("PUT", f"/api/v2/tickets/{ticket_id}/restore")

    def list_conversations(self, ticket_id: int, pagination: Optional[Pagination] = None) -> AsyncIterator[ConversationEntry]:
        check_pagination(pagination, *LIST_STRATEGIES)
        return self._http.get_paged_results(f"/api/v2/tickets/{ticket_id}/conversations", pagination, ConversationEntry)

    def list_time_entries(self, ticket_id: int, pagination: Optional[Pagination] = None) -> AsyncIterator[TimeEntry]:
        check_pagination(pagination, *LIST_STRATEGIES)
        return self._http.get_paged_results(f"/api/v2/tickets/{ticket_id}/time_entries", pagination, TimeEntry)

    def list_satisfaction_ratings(self, ticket_id: int, pagination: Optional[Pagination] = None) -> AsyncIterator[SatisfactionRating]:
        check_pagination(pagination, *LIST_STRATEGIES)
        return self._http.get_paged_results(
            f"/api/v2/tickets/{ticket_id}/satisfaction_ratings", pagination, SatisfactionRating
        )

    async def view_archived(self, ticket_id: int, includes: Optional[Sequence[TicketIncludes]] = None) -> Ticket:
        return await self._http.api_operation(
            "GET", f"/api/v2/tickets/archived/{ticket_id}", model=Ticket, params={"include": includes or None}
        )

    def list_archived_conversations(self, ticket_id: int, pagination: Optional[Pagination] = None) -> AsyncIterator[ConversationEntry]:
        check_pagination(pagination, *LIST_STRATEGIES)
        return self._http.get_paged_results(
            f"/api/v2/tickets/archived/{ticket_id}/conversations", pagination, ConversationEntry
        )

    async def view_summary(self, ticket_id: int) -> Optional[TicketSummary]:
        return await self._http.api_operation("GET", f"/api/v2/tickets/{ticket_id}/summary", model=TicketSummary)

    async def update_summary(self, ticket_id: int, body: str) -> TicketSummary:
        return await self._http.api_operation(
            "PUT", f"/api/v2/tickets/{ticket_id}/summary", {"body": body}, model=TicketSummary
        )

    async def delete_summary(self, ticket_id: int) -> None:
        await self._http.api_operation("DELETE", f"/api/v2/tickets/{ticket_id}/summary")
