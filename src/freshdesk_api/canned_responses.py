from datetime import datetime
from typing import AsyncIterator, List, Optional

from pydantic import BaseModel, Field

from .common import Attachment
from .http_client import FreshdeskHttpClient
from .pagination import LIST_STRATEGIES, Pagination, check_pagination


class CannedResponse(BaseModel):
    id: Optional[int] = None
    title: Optional[str] = None
    content: Optional[str] = None
    content_html: Optional[str] = None
    folder_id: Optional[int] = None
    visibility: Optional[int] = None
    group_ids: Optional[List[int]] = None
    attachments: Optional[List[Attachment]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CannedResponseFolder(BaseModel):
    id: Optional[int] = None
    name: Optional[str] = None
    personal: Optional[bool] = None
    responses_count: Optional[int] = None
    canned_responses: Optional[List[CannedResponse]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CannedResponseCreate(BaseModel):
    title: str = Field(..., description="Title of the canned response")
    content_html: str = Field(..., description="HTML version of the canned response content")
    folder_id: int = Field(..., description="Folder where the canned response gets added")
    visibility: int = Field(
        ...,
        description="Visibility of the canned response (0=all agents, 1=personal, 2=select groups)",
        ge=0,
        le=2
    )
    group_ids: Optional[List[int]] = Field(
        None,
        description="Groups for which the canned response is visible. Required if visibility=2"
    )


class CannedResponseUpdate(BaseModel):
    title: Optional[str] = None
    content_html: Optional[str] = None
    folder_id: Optional[int] = None
    visibility: Optional[int] = Field(None, ge=0, le=2)
    group_ids: Optional[List[int]] = None


class CannedResponseFolderCreate(BaseModel):
    name: str = Field(..., description="Name of the canned response folder")


class CannedResponsesClient:
    def __init__(self, http: FreshdeskHttpClient):
        self._http = http

    async def view(self, canned_response_id: int) -> CannedResponse:
        return await self._http.api_operation(
            "GET", f"/api/v2/canned_responses/{canned_response_id}", model=CannedResponse
        )

    async def create(self, request: CannedResponseCreate) -> CannedResponse:
        return await self._http.api_operation("POST", "/api/v2/canned_responses", request, model=CannedResponse)

    async def update(self, canned_response_id: int, request: CannedResponseUpdate) -> CannedResponse:
        return await self._http.api_operation(
            "PUT", f"/api/v2/canned_responses/{canned_response_id}", request, model=CannedResponse
        )

    async def list_folders(self) -> List[CannedResponseFolder]:
        return await self._http.api_operation(
            "GET", "/api/v2/canned_response_folders", model=List[CannedResponseFolder]
        )

    async def view_folder(self, folder_id: int) -> CannedResponseFolder:
        """Folder details including every canned response it holds."""
        return await self._http.api_operation(
            "GET", f"/api/v2/canned_response_folders/{folder_id}", model=CannedResponseFolder
        )

    async def create_folder(self, request: CannedResponseFolderCreate) -> CannedResponseFolder:
        return await self._http.api_operation(
            "POST", "/api/v2/canned_response_folders", request, model=CannedResponseFolder
        )

    async def update_folder(self, folder_id: int, request: CannedResponseFolderCreate) -> CannedResponseFolder:
        return await self._http.api_operation(
            "PUT", f"/api/v2/canned_response_folders/{folder_id}", request, model=CannedResponseFolder
        )

    def list_folder_responses(self, folder_id: int, pagination: Optional[Pagination] = None) -> AsyncIterator[CannedResponse]:
        check_pagination(pagination, *LIST_STRATEGIES)
        return self._http.get_paged_results(
            f"/api/v2/canned_response_folders/{folder_id}/responses", pagination, CannedResponse
        )
