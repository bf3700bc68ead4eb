from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, AsyncIterator, ClassVar, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, Field

from .agents import Agent, AgentTicketScope
from .common import AttachmentRequest, AutocompleteResult, ExportFields, ExportJob, FileAttachment, build_url
from .http_client import FreshdeskHttpClient
from .pagination import LIST_STRATEGIES, Pagination, check_pagination


class ContactState(str, Enum):
    BLOCKED = "blocked"
    DELETED = "deleted"
    UNVERIFIED = "unverified"
    VERIFIED = "verified"


class ContactCompany(BaseModel):
    company_id: int
    view_all_tickets: Optional[bool] = None


class Avatar(BaseModel):
    id: Optional[int] = None
    name: Optional[str] = None
    avatar_url: Optional[str] = None
    content_type: Optional[str] = None
    size: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Contact(BaseModel):
    id: Optional[int] = None
    name: Optional[str] = None
    email: Optional[str] = None
    other_emails: Optional[List[str]] = None
    phone: Optional[str] = None
    mobile: Optional[str] = None
    twitter_id: Optional[str] = None
    facebook_id: Optional[str] = None
    unique_external_id: Optional[str] = None
    active: Optional[bool] = None
    deleted: Optional[bool] = None
    address: Optional[str] = None
    company_id: Optional[int] = None
    view_all_tickets: Optional[bool] = None
    other_companies: Optional[List[ContactCompany]] = None
    description: Optional[str] = None
    job_title: Optional[str] = None
    language: Optional[str] = None
    time_zone: Optional[str] = None
    custom_fields: Optional[Dict[str, Any]] = None
    tags: Optional[List[str]] = None
    twitter_profile_status: Optional[bool] = None
    twitter_followers_count: Optional[int] = None
    avatar: Optional[Avatar] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class _ContactFields(AttachmentRequest):
    attachment_fields: ClassVar[Tuple[str, ...]] = ("avatar",)

    email: Optional[str] = None
    phone: Optional[str] = None
    mobile: Optional[str] = None
    twitter_id: Optional[str] = None
    unique_external_id: Optional[str] = None
    other_emails: Optional[List[str]] = None
    company_id: Optional[int] = None
    view_all_tickets: Optional[bool] = None
    other_companies: Optional[List[ContactCompany]] = None
    address: Optional[str] = None
    avatar: Optional[FileAttachment] = None
    custom_fields: Optional[Dict[str, Any]] = None
    description: Optional[str] = None
    job_title: Optional[str] = None
    language: Optional[str] = None
    tags: Optional[List[str]] = None
    time_zone: Optional[str] = None


class ContactCreateRequest(_ContactFields):
    name: str


class UpdateContactRequest(_ContactFields):
    name: Optional[str] = None


class MakeAgentRequest(BaseModel):
    occasional: Optional[bool] = None
    signature: Optional[str] = None
    ticket_scope: Optional[AgentTicketScope] = None
    skill_ids: Optional[List[int]] = None
    group_ids: Optional[List[int]] = None
    role_ids: Optional[List[int]] = None
    type: Optional[str] = Field(None, description="support_agent, field_agent or collaborator")
    focus_mode: Optional[bool] = None


class MergeContactFields(BaseModel):
    email: Optional[str] = None
    phone: Optional[str] = None
    mobile: Optional[str] = None
    twitter_id: Optional[str] = None
    unique_external_id: Optional[str] = None
    other_emails: Optional[List[str]] = None
    company_ids: Optional[List[int]] = None


class MergeContactsRequest(BaseModel):
    primary_contact_id: int
    secondary_contact_ids: List[int]
    contact: Optional[MergeContactFields] = None


class ContactField(BaseModel):
    id: Optional[int] = None
    name: Optional[str] = None
    label: Optional[str] = None
    label_for_customers: Optional[str] = None
    type: Optional[str] = None
    position: Optional[int] = None
    default: Optional[bool] = None
    required_for_agents: Optional[bool] = None
    required_for_customers: Optional[bool] = None
    customers_can_edit: Optional[bool] = None
    displayed_for_customers: Optional[bool] = None
    editable_in_signup: Optional[bool] = None
    choices: Optional[Any] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ContactFieldCreate(BaseModel):
    label: str = Field(..., description="Display name for the field (as seen by agents)")
    label_for_customers: str = Field(..., description="Display name for the field (as seen by customers)")
    type: str = Field(
        ...,
        description="Type of the field",
        pattern="^(custom_text|custom_paragraph|custom_checkbox|custom_number|custom_dropdown|custom_phone_number|custom_url|custom_date)$"
    )
    editable_in_signup: bool = Field(
        default=False,
        description="Set to true if the field can be updated by customers during signup"
    )
    position: int = Field(
        default=1,
        description="Position of the contact field"
    )
    required_for_agents: bool = Field(
        default=False,
        description="Set to true if the field is mandatory for agents"
    )
    customers_can_edit: bool = Field(
        default=False,
        description="Set to true if the customer can edit the fields in the customer portal"
    )
    required_for_customers: bool = Field(
        default=False,
        description="Set to true if the field is mandatory in the customer portal"
    )
    displayed_for_customers: bool = Field(
        default=False,
        description="Set to true if the customers can see the field in the customer portal"
    )
    choices: Optional[List[Dict[str, Union[str, int]]]] = Field(
        default=None,
        description="Array of objects in format {'value': 'Choice text', 'position': 1} for dropdown choices"
    )


@dataclass
class ListAllContactsRequest:
    email: Optional[str] = None
    mobile: Optional[str] = None
    phone: Optional[str] = None
    company_id: Optional[int] = None
    state: Optional[ContactState] = None
    updated_since: Optional[datetime] = None

    @property
    def url(self) -> str:
        return build_url("/api/v2/contacts", {
            "email": self.email,
            "mobile": self.mobile,
            "phone": self.phone,
            "company_id": self.company_id,
            "state": self.state,
            "_updated_since": self.updated_since,
        })


class ContactsClient:
    def __init__(self, http: FreshdeskHttpClient):
        self._http = http

    async def view(self, contact_id: int) -> Contact:
        return await self._http.api_operation("GET", f"/api/v2/contacts/{contact_id}", model=Contact)

    def list_all(
        self,
        request: Optional[ListAllContactsRequest] = None,
        pagination: Optional[Pagination] = None,
    ) -> AsyncIterator[Contact]:
        check_pagination(pagination, *LIST_STRATEGIES)
        request = request or ListAllContactsRequest()
        return self._http.get_paged_results(request.url, pagination, Contact)

    async def create(self, request: ContactCreateRequest) -> Contact:
        return await self._http.api_operation("POST", "/api/v2/contacts", request, model=Contact)

    async def update(self, contact_id: int, request: UpdateContactRequest) -> Contact:
        return await self._http.api_operation("PUT", f"/api/v2/contacts/{contact_id}", request, model=Contact)

    async def delete(self, contact_id: int, *, hard_delete: bool = False) -> None:
        """Soft delete by default; ``hard_delete`` removes the contact permanently."""
        if hard_delete:
            await self._http.api_operation(
                "DELETE", f"/api/v2/contacts/{contact_id}/hard_delete", params={"force": True}
            )
        else:
            await self._http.api_operation("DELETE", f"/api/v2/contacts/{contact_id}")

    async def restore(self, contact_id: int) -> None:
        await self._http.api_operation("PUT", f"/api/v2/contacts/{contact_id}/restore")

    async def make_agent(self, contact_id: int, request: Optional[MakeAgentRequest] = None) -> Agent:
        return await self._http.api_operation(
            "PUT", f"/api/v2/contacts/{contact_id}/make_agent", request or MakeAgentRequest(), model=Agent
        )

    async def merge(self, request: MergeContactsRequest) -> None:
        await self._http.api_operation("POST", "/api/v2/contacts/merge", request)

    async def autocomplete(self, term: str) -> List[AutocompleteResult]:
        return await self._http.api_operation(
            "GET", "/api/v2/contacts/autocomplete", model=List[AutocompleteResult], params={"term": term}
        )

    async def export(self, fields: ExportFields) -> ExportJob:
        return await self._http.api_operation(
            "POST", "/api/v2/contacts/export", {"fields": fields.model_dump()}, model=ExportJob
        )

    async def view_export(self, export_id: str) -> ExportJob:
        return await self._http.api_operation("GET", f"/api/v2/contacts/export/{export_id}", model=ExportJob)

    async def list_fields(self) -> List[ContactField]:
        return await self._http.api_operation("GET", "/api/v2/contact_fields", model=List[ContactField])

    async def view_field(self, contact_field_id: int) -> ContactField:
        return await self._http.api_operation(
            "GET", f"/api/v2/admin/contact_fields/{contact_field_id}", model=ContactField
        )

    async def create_field(self, request: ContactFieldCreate) -> ContactField:
        return await self._http.api_operation("POST", "/api/v2/admin/contact_fields", request, model=ContactField)

    async def update_field(self, contact_field_id: int, contact_field_fields: Dict[str, Any]) -> ContactField:
        return await self._http.api_operation(
            "PUT", f"/api/v2/admin/contact_fields/{contact_field_id}", contact_field_fields, model=ContactField
        )
