from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .common import Attachment, AttachmentRequest, FileAttachment
from .http_client import FreshdeskHttpClient


class ConversationEntry(BaseModel):
    """A reply or note on a ticket."""

    id: Optional[int] = None
    body: Optional[str] = None
    body_text: Optional[str] = None
    incoming: Optional[bool] = None
    private: Optional[bool] = None
    user_id: Optional[int] = None
    support_email: Optional[str] = None
    source: Optional[int] = None
    category: Optional[int] = None
    ticket_id: Optional[int] = None
    to_emails: Optional[List[str]] = None
    from_email: Optional[str] = None
    cc_emails: Optional[List[str]] = None
    bcc_emails: Optional[List[str]] = None
    email_failure_count: Optional[int] = None
    outgoing_failures: Optional[Any] = None
    attachments: Optional[List[Attachment]] = None
    source_additional_info: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CreateReplyRequest(AttachmentRequest):
    body: str = Field(..., description="HTML content of the reply")
    from_email: Optional[str] = None
    user_id: Optional[int] = Field(None, description="Agent on whose behalf the reply is sent")
    cc_emails: Optional[List[str]] = None
    bcc_emails: Optional[List[str]] = None
    attachments: Optional[List[FileAttachment]] = None


class CreateNoteRequest(AttachmentRequest):
    body: str = Field(..., description="HTML content of the note")
    incoming: Optional[bool] = None
    notify_emails: Optional[List[str]] = None
    private: Optional[bool] = Field(True, description="Private notes are hidden from the requester")
    user_id: Optional[int] = None
    attachments: Optional[List[FileAttachment]] = None


class UpdateNoteRequest(AttachmentRequest):
    body: str
    attachments: Optional[List[FileAttachment]] = None


class ConversationsClient:
    def __init__(self, http: FreshdeskHttpClient):
        self._http = http

    async def create_reply(self, ticket_id: int, request: CreateReplyRequest) -> ConversationEntry:
        return await self._http.api_operation(
            "POST", f"/api/v2/tickets/{ticket_id}/reply", request, model=ConversationEntry
        )

    async def create_note(self, ticket_id: int, request: CreateNoteRequest) -> ConversationEntry:
        return await self._http.api_operation(
            "POST", f"/api/v2/tickets/{ticket_id}/notes", request, model=ConversationEntry
        )

    async def update_note(self, conversation_id: int, request: UpdateNoteRequest) -> ConversationEntry:
        """Only notes can be edited; Freshdesk rejects updates to replies."""
        return await self._http.api_operation(
            "PUT", f"/api/v2/conversations/{conversation_id}", request, model=ConversationEntry
        )

    async def delete(self, conversation_id: int) -> None:
        await self._http.api_operation("DELETE", f"/api/v2/conversations/{conversation_id}")
