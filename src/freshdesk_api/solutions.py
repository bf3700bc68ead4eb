from datetime import datetime
from enum import IntEnum
from typing import AsyncIterator, List, Optional

from pydantic import BaseModel

from .common import Attachment, AttachmentRequest, FileAttachment
from .http_client import FreshdeskHttpClient
from .pagination import LIST_STRATEGIES, Pagination, check_pagination


class ArticleStatus(IntEnum):
    DRAFT = 1
    PUBLISHED = 2

class ArticleType(IntEnum):
    PERMANENT = 1
    WORKAROUND = 2

class FolderVisibility(IntEnum):
    ALL_USERS = 1
    LOGGED_IN_USERS = 2
    AGENTS = 3
    SELECTED_COMPANIES = 4
    BOTS = 5
    SELECTED_CONTACT_SEGMENTS = 6
    SELECTED_COMPANY_SEGMENTS = 7


class Category(BaseModel):
    id: Optional[int] = None
    name: Optional[str] = None
    description: Optional[str] = None
    visible_in_portals: Optional[List[int]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Folder(BaseModel):
    id: Optional[int] = None
    name: Optional[str] = None
    description: Optional[str] = None
    category_id: Optional[int] = None
    parent_folder_id: Optional[int] = None
    visibility: Optional[int] = None
    company_ids: Optional[List[int]] = None
    contact_segment_ids: Optional[List[int]] = None
    company_segment_ids: Optional[List[int]] = None
    articles_count: Optional[int] = None
    sub_folders_count: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SeoData(BaseModel):
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    meta_keywords: Optional[str] = None


class Article(BaseModel):
    id: Optional[int] = None
    type: Optional[int] = None
    status: Optional[int] = None
    agent_id: Optional[int] = None
    category_id: Optional[int] = None
    folder_id: Optional[int] = None
    folder_visibility: Optional[int] = None
    title: Optional[str] = None
    description: Optional[str] = None
    description_text: Optional[str] = None
    seo_data: Optional[SeoData] = None
    tags: Optional[List[str]] = None
    attachments: Optional[List[Attachment]] = None
    cloud_files: Optional[List[dict]] = None
    thumbs_up: Optional[int] = None
    thumbs_down: Optional[int] = None
    hits: Optional[int] = None
    suggested: Optional[int] = None
    feedback_count: Optional[int] = None
    folder_name: Optional[str] = None
    category_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UpdateCategoryRequest(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    visible_in_portals: Optional[List[int]] = None


class CreateCategoryRequest(UpdateCategoryRequest):
    name: str


class UpdateFolderRequest(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    visibility: Optional[FolderVisibility] = None
    company_ids: Optional[List[int]] = None
    contact_segment_ids: Optional[List[int]] = None
    company_segment_ids: Optional[List[int]] = None


class CreateFolderRequest(UpdateFolderRequest):
    name: str
    visibility: FolderVisibility = FolderVisibility.ALL_USERS


class UpdateArticleRequest(AttachmentRequest):
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[ArticleStatus] = None
    type: Optional[ArticleType] = None
    agent_id: Optional[int] = None
    folder_id: Optional[int] = None
    seo_data: Optional[SeoData] = None
    tags: Optional[List[str]] = None
    attachments: Optional[List[FileAttachment]] = None


class CreateArticleRequest(UpdateArticleRequest):
    title: str
    description: str
    status: ArticleStatus = ArticleStatus.DRAFT


def _localised(path: str, language: Optional[str]) -> str:
    return f"{path}/{language}" if language else path


class SolutionsClient:
    """Knowledge base: categories hold folders, folders hold articles.

    Methods taking ``language`` address the translation in that language
    (e.g. ``"fr"``); without it the account's primary language is used.
    """

    def __init__(self, http: FreshdeskHttpClient):
        self._http = http

    # ===== Categories =====

    async def list_categories(self, language: Optional[str] = None) -> List[Category]:
        return await self._http.api_operation(
            "GET", _localised("/api/v2/solutions/categories", language), model=List[Category]
        )

    async def view_category(self, category_id: int, language: Optional[str] = None) -> Category:
        return await self._http.api_operation(
            "GET", _localised(f"/api/v2/solutions/categories/{category_id}", language), model=Category
        )

    async def create_category(self, request: CreateCategoryRequest) -> Category:
        return await self._http.api_operation("POST", "/api/v2/solutions/categories", request, model=Category)

    async def create_category_translation(self, category_id: int, language: str, request: CreateCategoryRequest) -> Category:
        return await self._http.api_operation(
            "POST", f"/api/v2/solutions/categories/{category_id}/{language}", request, model=Category
        )

    async def update_category(self, category_id: int, request: UpdateCategoryRequest, language: Optional[str] = None) -> Category:
        return await self._http.api_operation(
            "PUT", _localised(f"/api/v2/solutions/categories/{category_id}", language), request, model=Category
        )

    async def delete_category(self, category_id: int) -> None:
        await self._http.api_operation("DELETE", f"/api/v2/solutions/categories/{category_id}")

    # ===== Folders =====

    async def list_folders(self, category_id: int, language: Optional[str] = None) -> List[Folder]:
        return await self._http.api_operation(
            "GET", _localised(f"/api/v2/solutions/categories/{category_id}/folders", language), model=List[Folder]
        )

    async def view_folder(self, folder_id: int, language: Optional[str] = None) -> Folder:
        return await self._http.api_operation(
            "GET", _localised(f"/api/v2/solutions/folders/{folder_id}", language), model=Folder
        )

    async def create_folder(self, category_id: int, request: CreateFolderRequest) -> Folder:
        return await self._http.api_operation(
            "POST", f"/api/v2/solutions/categories/{category_id}/folders", request, model=Folder
        )

    async def create_folder_translation(self, folder_id: int, language: str, request: CreateFolderRequest) -> Folder:
        return await self._http.api_operation(
            "POST", f"/api/v2/solutions/folders/{folder_id}/{language}", request, model=Folder
        )

    async def update_folder(self, folder_id: int, request: UpdateFolderRequest, language: Optional[str] = None) -> Folder:
        return await self._http.api_operation(
            "PUT", _localised(f"/api/v2/solutions/folders/{folder_id}", language), request, model=Folder
        )

    async def delete_folder(self, folder_id: int) -> None:
        await self._http.api_operation("DELETE", f"/api/v2/solutions/folders/{folder_id}")

    # ===== Articles =====

    def list_articles(
        self,
        folder_id: int,
        language: Optional[str] = None,
        pagination: Optional[Pagination] = None,
    ) -> AsyncIterator[Article]:
        check_pagination(pagination, *LIST_STRATEGIES)
        return self._http.get_paged_results(
            _localised(f"/api/v2/solutions/folders/{folder_id}/articles", language), pagination, Article
        )

    async def view_article(self, article_id: int, language: Optional[str] = None) -> Article:
        return await self._http.api_operation(
            "GET", _localised(f"/api/v2/solutions/articles/{article_id}", language), model=Article
        )

    async def create_article(self, folder_id: int, request: CreateArticleRequest) -> Article:
        return await self._http.api_operation(
            "POST", f"/api/v2/solutions/folders/{folder_id}/articles", request, model=Article
        )

    async def create_article_translation(self, article_id: int, language: str, request: CreateArticleRequest) -> Article:
        return await self._http.api_operation(
            "POST", f"/api/v2/solutions/articles/{article_id}/{language}", request, model=Article
        )

    async def update_article(self, article_id: int, request: UpdateArticleRequest, language: Optional[str] = None) -> Article:
        return await self._http.api_operation(
            "PUT", _localised(f"/api/v2/solutions/articles/{article_id}", language), request, model=Article
        )

    async def delete_article(self, article_id: int) -> None:
        await self._http.api_operation("DELETE", f"/api/v2/solutions/articles/{article_id}")

    async def search(self, term: str, language: Optional[str] = None) -> List[Article]:
        return await self._http.api_operation(
            "GET", "/api/v2/search/solutions", model=List[Article], params={"term": term, "language": language}
        )
