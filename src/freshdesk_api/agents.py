from dataclasses import dataclass
from datetime import datetime
from enum import Enum, IntEnum
from typing import AsyncIterator, List, Optional

from pydantic import BaseModel, Field

from .common import AutocompleteResult, build_url
from .http_client import FreshdeskHttpClient
from .pagination import LIST_STRATEGIES, Pagination, check_pagination


class AgentTicketScope(IntEnum):
    GLOBAL_ACCESS = 1
    GROUP_ACCESS = 2
    RESTRICTED_ACCESS = 3

class AgentState(str, Enum):
    FULLTIME = "fulltime"
    OCCASIONAL = "occasional"


class AgentContact(BaseModel):
    active: Optional[bool] = None
    email: Optional[str] = None
    job_title: Optional[str] = None
    language: Optional[str] = None
    last_login_at: Optional[datetime] = None
    mobile: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    time_zone: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Agent(BaseModel):
    id: Optional[int] = None
    available: Optional[bool] = None
    occasional: Optional[bool] = None
    ticket_scope: Optional[int] = None
    signature: Optional[str] = None
    group_ids: Optional[List[int]] = None
    role_ids: Optional[List[int]] = None
    skill_ids: Optional[List[int]] = None
    type: Optional[str] = None
    focus_mode: Optional[bool] = None
    last_active_at: Optional[datetime] = None
    available_since: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    contact: Optional[AgentContact] = None


class _AgentFields(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    mobile: Optional[str] = None
    job_title: Optional[str] = None
    language: Optional[str] = None
    time_zone: Optional[str] = None
    occasional: Optional[bool] = None
    signature: Optional[str] = None
    skill_ids: Optional[List[int]] = None
    group_ids: Optional[List[int]] = None
    role_ids: Optional[List[int]] = None
    agent_type: Optional[int] = Field(None, description="1 support agent, 2 field agent, 3 collaborator")
    focus_mode: Optional[bool] = None


class CreateAgentRequest(_AgentFields):
    email: str
    ticket_scope: AgentTicketScope


class UpdateAgentRequest(_AgentFields):
    email: Optional[str] = None
    ticket_scope: Optional[AgentTicketScope] = None


@dataclass
class ListAllAgentsRequest:
    email: Optional[str] = None
    mobile: Optional[str] = None
    phone: Optional[str] = None
    state: Optional[AgentState] = None

    @property
    def url(self) -> str:
        return build_url("/api/v2/agents", {
            "email": self.email,
            "mobile": self.mobile,
            "phone": self.phone,
            "state": self.state,
        })


class AgentsClient:
    def __init__(self, http: FreshdeskHttpClient):
        self._http = http

    async def view(self, agent_id: int) -> Agent:
        return await self._http.api_operation("GET", f"/api/v2/agents/{agent_id}", model=Agent)

    def list_all(
        self,
        request: Optional[ListAllAgentsRequest] = None,
        pagination: Optional[Pagination] = None,
    ) -> AsyncIterator[Agent]:
        check_pagination(pagination, *LIST_STRATEGIES)
        request = request or ListAllAgentsRequest()
        return self._http.get_paged_results(request.url, pagination, Agent)

    async def create(self, request: CreateAgentRequest) -> Agent:
        return await self._http.api_operation("POST", "/api/v2/agents", request, model=Agent)

    async def update(self, agent_id: int, request: UpdateAgentRequest) -> Agent:
        return await self._http.api_operation("PUT", f"/api/v2/agents/{agent_id}", request, model=Agent)

    async def delete(self, agent_id: int) -> None:
        """Downgrades the agent to a contact; Freshdesk keeps the user record."""
        await self._http.api_operation("DELETE", f"/api/v2/agents/{agent_id}")

    async def autocomplete(self, term: str) -> List[AutocompleteResult]:
        return await self._http.api_operation(
            "GET", "/api/v2/agents/autocomplete", model=List[AutocompleteResult], params={"term": term}
        )


class MeClient:
    """The agent that owns the API key."""

    def __init__(self, http: FreshdeskHttpClient):
        self._http = http

    async def view(self) -> Agent:
        return await self._http.api_operation("GET", "/api/v2/agents/me", model=Agent)
