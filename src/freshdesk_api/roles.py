from datetime import datetime
from typing import AsyncIterator, Optional

from pydantic import BaseModel

from .http_client import FreshdeskHttpClient
from .pagination import LIST_STRATEGIES, Pagination, check_pagination


class Role(BaseModel):
    id: Optional[int] = None
    name: Optional[str] = None
    description: Optional[str] = None
    default: Optional[bool] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RolesClient:
    def __init__(self, http: FreshdeskHttpClient):
        self._http = http

    async def view(self, role_id: int) -> Role:
        return await self._http.api_operation("GET", f"/api/v2/roles/{role_id}", model=Role)

    def list_all(self, pagination: Optional[Pagination] = None) -> AsyncIterator[Role]:
        check_pagination(pagination, *LIST_STRATEGIES)
        return self._http.get_paged_results("/api/v2/roles", pagination, Role)
