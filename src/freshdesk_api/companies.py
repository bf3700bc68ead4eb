from datetime import datetime
from typing import Any, AsyncIterator, Dict, List, Optional

from pydantic import BaseModel, Field

from .common import AutocompleteResult, ExportFields, ExportJob, build_url
from .http_client import FreshdeskHttpClient
from .pagination import LIST_STRATEGIES, PageBasedPagination, Pagination, check_pagination
from .tickets import search_query


class Company(BaseModel):
    id: Optional[int] = None
    name: Optional[str] = None
    description: Optional[str] = None
    note: Optional[str] = None
    domains: Optional[List[str]] = None
    health_score: Optional[str] = None
    account_tier: Optional[str] = None
    renewal_date: Optional[str] = None
    industry: Optional[str] = None
    custom_fields: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class _CompanyFields(BaseModel):
    description: Optional[str] = None
    note: Optional[str] = None
    domains: Optional[List[str]] = None
    health_score: Optional[str] = None
    account_tier: Optional[str] = None
    renewal_date: Optional[str] = None
    industry: Optional[str] = None
    custom_fields: Optional[Dict[str, Any]] = None


class CreateCompanyRequest(_CompanyFields):
    name: str = Field(..., description="Name of the company, unique per account")


class UpdateCompanyRequest(_CompanyFields):
    name: Optional[str] = None


class CompanyField(BaseModel):
    id: Optional[int] = None
    name: Optional[str] = None
    label: Optional[str] = None
    type: Optional[str] = None
    position: Optional[int] = None
    default: Optional[bool] = None
    required_for_agents: Optional[bool] = None
    choices: Optional[Any] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class _CompanyAutocomplete(BaseModel):
    companies: List[AutocompleteResult] = Field(default_factory=list)


class CompaniesClient:
    def __init__(self, http: FreshdeskHttpClient):
        self._http = http

    async def view(self, company_id: int) -> Company:
        return await self._http.api_operation("GET", f"/api/v2/companies/{company_id}", model=Company)

    def list_all(self, pagination: Optional[Pagination] = None) -> AsyncIterator[Company]:
        check_pagination(pagination, *LIST_STRATEGIES)
        return self._http.get_paged_results("/api/v2/companies", pagination, Company)

    def filter(self, query: str, pagination: Optional[PageBasedPagination] = None) -> AsyncIterator[Company]:
        """Search companies with a filter query, e.g. ``domain:'acme.com'``."""
        check_pagination(pagination, PageBasedPagination)
        url = build_url("/api/v2/search/companies", {"query": search_query(query)})
        return self._http.get_paged_results(url, pagination or PageBasedPagination(), Company)

    async def create(self, request: CreateCompanyRequest) -> Company:
        return await self._http.api_operation("POST", "/api/v2/companies", request, model=Company)

    async def update(self, company_id: int, request: UpdateCompanyRequest) -> Company:
        return await self._http.api_operation("PUT", f"/api/v2/companies/{company_id}", request, model=Company)

    async def delete(self, company_id: int) -> None:
        await self._http.api_operation("DELETE", f"/api/v2/companies/{company_id}")

    async def autocomplete(self, name: str) -> List[AutocompleteResult]:
        result = await self._http.api_operation(
            "GET", "/api/v2/companies/autocomplete", model=_CompanyAutocomplete, params={"name": name}
        )
        return result.companies if result is not None else []

    async def export(self, fields: ExportFields) -> ExportJob:
        return await self._http.api_operation(
            "POST", "/api/v2/companies/export", {"fields": fields.model_dump()}, model=ExportJob
        )

    async def view_export(self, export_id: str) -> ExportJob:
        return await self._http.api_operation("GET", f"/api/v2/companies/export/{export_id}", model=ExportJob)

    async def list_fields(self) -> List[CompanyField]:
        return await self._http.api_operation("GET", "/api/v2/company_fields", model=List[CompanyField])
