"""Channel API: ticket import endpoints that accept historical timestamps."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from .conversations import ConversationEntry, CreateNoteRequest, CreateReplyRequest
from .http_client import FreshdeskHttpClient
from .tickets import CreateTicketRequest, Ticket

CHANNEL_PREFIX = "/api/channel/v2"


class _ImportFields(BaseModel):
    import_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ChannelCreateTicketRequest(CreateTicketRequest, _ImportFields):
    pass


class ChannelCreateReplyRequest(CreateReplyRequest, _ImportFields):
    pass


class ChannelCreateNoteRequest(CreateNoteRequest, _ImportFields):
    pass


class ChannelApiClient:
    def __init__(self, http: FreshdeskHttpClient):
        self._http = http

    async def create_ticket(self, request: ChannelCreateTicketRequest) -> Ticket:
        return await self._http.api_operation("POST", f"{CHANNEL_PREFIX}/tickets", request, model=Ticket)

    async def create_reply(self, ticket_id: int, request: ChannelCreateReplyRequest) -> ConversationEntry:
        return await self._http.api_operation(
            "POST", f"{CHANNEL_PREFIX}/tickets/{ticket_id}/reply", request, model=ConversationEntry
        )

    async def create_note(self, ticket_id: int, request: ChannelCreateNoteRequest) -> ConversationEntry:
        return await self._http.api_operation(
            "POST", f"{CHANNEL_PREFIX}/tickets/{ticket_id}/notes", request, model=ConversationEntry
        )
