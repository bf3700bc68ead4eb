from datetime import datetime
from enum import Enum
from typing import AsyncIterator, List, Optional

from pydantic import BaseModel, Field

from .http_client import FreshdeskHttpClient
from .pagination import LIST_STRATEGIES, Pagination, check_pagination


class UnassignedForOptions(str, Enum):
    THIRTY_MIN = "30m"
    ONE_HOUR = "1h"
    TWO_HOURS = "2h"
    FOUR_HOURS = "4h"
    EIGHT_HOURS = "8h"
    TWELVE_HOURS = "12h"
    ONE_DAY = "1d"
    TWO_DAYS = "2d"
    THREE_DAYS = "3d"


class Group(BaseModel):
    id: Optional[int] = None
    name: Optional[str] = None
    description: Optional[str] = None
    escalate_to: Optional[int] = None
    unassigned_for: Optional[str] = None
    business_hour_id: Optional[int] = None
    agent_ids: Optional[List[int]] = None
    group_type: Optional[str] = None
    auto_ticket_assign: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class GroupCreate(BaseModel):
    name: str = Field(..., description="Name of the group")
    description: Optional[str] = Field(None, description="Description of the group")
    agent_ids: Optional[List[int]] = Field(
        default=None,
        description="Array of agent user ids"
    )
    auto_ticket_assign: Optional[int] = Field(
        default=0,
        ge=0,
        le=1,
        description="Automatic ticket assignment type (0 or 1)"
    )
    escalate_to: Optional[int] = Field(
        None,
        description="User ID to whom escalation email is sent if ticket is unassigned"
    )
    unassigned_for: Optional[UnassignedForOptions] = Field(
        default=UnassignedForOptions.THIRTY_MIN,
        description="Time after which escalation email will be sent"
    )


class GroupUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    agent_ids: Optional[List[int]] = None
    auto_ticket_assign: Optional[int] = Field(None, ge=0, le=1)
    escalate_to: Optional[int] = None
    unassigned_for: Optional[UnassignedForOptions] = None


class GroupsClient:
    def __init__(self, http: FreshdeskHttpClient):
        self._http = http

    async def view(self, group_id: int) -> Group:
        return await self._http.api_operation("GET", f"/api/v2/groups/{group_id}", model=Group)

    def list_all(self, pagination: Optional[Pagination] = None) -> AsyncIterator[Group]:
        check_pagination(pagination, *LIST_STRATEGIES)
        return self._http.get_paged_results("/api/v2/groups", pagination, Group)

    async def create(self, request: GroupCreate) -> Group:
        return await self._http.api_operation("POST", "/api/v2/groups", request, model=Group)

    async def update(self, group_id: int, request: GroupUpdate) -> Group:
        return await self._http.api_operation("PUT", f"/api/v2/groups/{group_id}", request, model=Group)

    async def delete(self, group_id: int) -> None:
        await self._http.api_operation("DELETE", f"/api/v2/groups/{group_id}")
