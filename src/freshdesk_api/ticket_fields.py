from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel

from .http_client import FreshdeskHttpClient


class TicketFieldChoice(BaseModel):
    """One dropdown option; dependent fields nest their levels in ``choices``."""

    id: Optional[int] = None
    value: Optional[str] = None
    label: Optional[str] = None
    position: Optional[int] = None
    parent_choice_id: Optional[int] = None
    choices: Optional[List["TicketFieldChoice"]] = None


# Older accounts return dependent choices as nested mappings
# ({"Country": {"State": ["City", ...]}}) rather than a list of choices.
# ticket_type sends its choices as plain strings.
TicketFieldChoices = Union[List[TicketFieldChoice], List[str], Dict[str, Any]]


class NestedTicketField(BaseModel):
    id: Optional[int] = None
    name: Optional[str] = None
    label: Optional[str] = None
    label_in_portal: Optional[str] = None
    description: Optional[str] = None
    level: Optional[int] = None
    ticket_field_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Section(BaseModel):
    id: Optional[int] = None
    label: Optional[str] = None
    parent_ticket_field_id: Optional[int] = None
    ticket_field_ids: Optional[List[int]] = None
    choice_ids: Optional[List[int]] = None
    is_fsm: Optional[bool] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TicketField(BaseModel):
    id: Optional[int] = None
    name: Optional[str] = None
    label: Optional[str] = None
    label_for_customers: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    position: Optional[int] = None
    default: Optional[bool] = None
    archived: Optional[bool] = None
    required_for_closure: Optional[bool] = None
    required_for_agents: Optional[bool] = None
    required_for_customers: Optional[bool] = None
    customers_can_edit: Optional[bool] = None
    displayed_to_customers: Optional[bool] = None
    portal_cc: Optional[bool] = None
    portal_cc_to: Optional[str] = None
    is_fsm: Optional[bool] = None
    field_update_in_progress: Optional[bool] = None
    has_section: Optional[bool] = None
    choices: Optional[TicketFieldChoices] = None
    nested_ticket_fields: Optional[List[NestedTicketField]] = None
    sections: Optional[List[Section]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SectionMapping(BaseModel):
    section_id: int
    position: int


class DependentField(BaseModel):
    label: str
    label_for_customers: str
    level: int


class UpdateTicketFieldRequest(BaseModel):
    label: Optional[str] = None
    label_for_customers: Optional[str] = None
    customers_can_edit: Optional[bool] = None
    displayed_to_customers: Optional[bool] = None
    position: Optional[int] = None
    required_for_closure: Optional[bool] = None
    required_for_agents: Optional[bool] = None
    required_for_customers: Optional[bool] = None
    choices: Optional[List[TicketFieldChoice]] = None
    dependent_fields: Optional[List[DependentField]] = None
    section_mappings: Optional[List[SectionMapping]] = None


class CreateTicketFieldRequest(UpdateTicketFieldRequest):
    label: str
    label_for_customers: str
    type: str


class UpdateSectionRequest(BaseModel):
    label: Optional[str] = None
    choice_ids: Optional[List[int]] = None
    ticket_field_ids: Optional[List[int]] = None


class CreateSectionRequest(UpdateSectionRequest):
    label: str
    choice_ids: List[int]


class TicketFieldsClient:
    def __init__(self, http: FreshdeskHttpClient):
        self._http = http

    async def list_all(self, type: Optional[str] = None) -> List[TicketField]:
        """List ticket fields, optionally only those of one ``type`` such as ``default_status``."""
        return await self._http.api_operation(
            "GET", "/api/v2/ticket_fields", model=List[TicketField], params={"type": type}
        )

    async def view(self, ticket_field_id: int, include_sections: bool = False) -> TicketField:
        return await self._http.api_operation(
            "GET",
            f"/api/v2/admin/ticket_fields/{ticket_field_id}",
            model=TicketField,
            params={"include": "section" if include_sections else None},
        )

    async def create(self, request: CreateTicketFieldRequest) -> TicketField:
        return await self._http.api_operation("POST", "/api/v2/admin/ticket_fields", request, model=TicketField)

    async def update(self, ticket_field_id: int, request: UpdateTicketFieldRequest) -> TicketField:
        return await self._http.api_operation(
            "PUT", f"/api/v2/admin/ticket_fields/{ticket_field_id}", request, model=TicketField
        )

    async def delete(self, ticket_field_id: int) -> None:
        await self._http.api_operation("DELETE", f"/api/v2/admin/ticket_fields/{ticket_field_id}")

    async def list_sections(self, ticket_field_id: int) -> List[Section]:
        return await self._http.api_operation(
            "GET", f"/api/v2/admin/ticket_fields/{ticket_field_id}/sections", model=List[Section]
        )

    async def view_section(self, ticket_field_id: int, section_id: int) -> Section:
        return await self._http.api_operation(
            "GET", f"/api/v2/admin/ticket_fields/{ticket_field_id}/sections/{section_id}", model=Section
        )

    async def create_section(self, ticket_field_id: int, request: CreateSectionRequest) -> Section:
        return await self._http.api_operation(
            "POST", f"/api/v2/admin/ticket_fields/{ticket_field_id}/sections", request, model=Section
        )

    async def update_section(self, ticket_field_id: int, section_id: int, request: UpdateSectionRequest) -> Section:
        return await self._http.api_operation(
            "PUT", f"/api/v2/admin/ticket_fields/{ticket_field_id}/sections/{section_id}", request, model=Section
        )

    async def delete_section(self, ticket_field_id: int, section_id: int) -> None:
        await self._http.api_operation(
            "DELETE", f"/api/v2/admin/ticket_fields/{ticket_field_id}/sections/{section_id}"
        )
