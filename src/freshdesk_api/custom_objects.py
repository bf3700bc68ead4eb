from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, AsyncIterator, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, Field

from .common import SortOrder, encode_query
from .http_client import FreshdeskHttpClient
from .pagination import CUSTOM_OBJECTS_PREFIX, TokenBasedPagination, check_pagination


class CustomObjectFieldChoice(BaseModel):
    id: Optional[int] = None
    value: Optional[str] = None
    position: Optional[int] = None


class CustomObjectField(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    label: Optional[str] = None
    type: Optional[str] = None
    position: Optional[int] = None
    required: Optional[bool] = None
    editable: Optional[bool] = None
    visible: Optional[bool] = None
    deleted: Optional[bool] = None
    placeholder: Optional[str] = None
    hint: Optional[str] = None
    filterable: Optional[bool] = None
    searchable: Optional[bool] = None
    parent_id: Optional[str] = None
    choices: Optional[List[CustomObjectFieldChoice]] = None


class CustomObjectSchema(BaseModel):
    # ids come back as numbers from the list endpoint and strings elsewhere
    id: Optional[Union[int, str]] = None
    name: Optional[str] = None
    prefix: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    version: Optional[int] = None
    deleted: Optional[bool] = None
    # epoch milliseconds on the wire
    created_time: Optional[datetime] = None
    updated_time: Optional[datetime] = None
    fields: Optional[List[CustomObjectField]] = None


class _SchemaList(BaseModel):
    schemas: List[CustomObjectSchema] = Field(default_factory=list)


class CustomObjectRecord(BaseModel):
    display_id: Optional[str] = None
    version: Optional[int] = None
    created_time: Optional[datetime] = None
    updated_time: Optional[datetime] = None
    data: Dict[str, Any] = Field(default_factory=dict)
    metadata: Optional[Dict[str, Any]] = None


class _RecordCount(BaseModel):
    count: int = 0


class CreateRecordRequest(BaseModel):
    data: Dict[str, Any]


class UpdateRecordRequest(BaseModel):
    data: Dict[str, Any]
    version: Optional[int] = Field(None, description="Version last read; Freshdesk rejects stale updates")
    display_id: Optional[str] = None


class FilterOperator(str, Enum):
    EQUALS = ""
    GREATER_THAN = "gt"
    LESS_THAN = "lt"
    GREATER_THAN_OR_EQUAL = "gte"
    LESS_THAN_OR_EQUAL = "lte"


@dataclass
class RecordFilter:
    field: str
    operator: FilterOperator
    value: str

    def as_param(self) -> Tuple[str, str]:
        if self.operator is FilterOperator.EQUALS:
            return self.field, self.value
        return f"{self.field}[{self.operator.value}]", self.value


@dataclass
class RecordSort:
    sort_by: str
    order: SortOrder = SortOrder.ASC

    def as_param(self) -> Tuple[str, str]:
        return "sort_by", f"{self.sort_by};{self.order.value.upper()}"


@dataclass
class ListAllRecordsRequest:
    filters: List[RecordFilter] = field(default_factory=list)
    sort: Optional[RecordSort] = None

    def get_query(self) -> str:
        """Query string for the records endpoint, ``""`` when nothing is set.

        >>> ListAllRecordsRequest(sort=RecordSort("created_time")).get_query()
        '?sort_by=created_time%3BASC'
        """
        params = [f.as_param() for f in self.filters or []]
        if self.sort is not None:
            params.append(self.sort.as_param())
        query = encode_query(params)
        return f"?{query}" if query else ""


class CustomObjectsClient:
    def __init__(self, http: FreshdeskHttpClient):
        self._http = http

    def _records_url(self, schema_id: Union[int, str]) -> str:
        return f"{CUSTOM_OBJECTS_PREFIX}/schemas/{schema_id}/records"

    async def list_schemas(self) -> List[CustomObjectSchema]:
        result = await self._http.api_operation("GET", f"{CUSTOM_OBJECTS_PREFIX}/schemas", model=_SchemaList)
        return result.schemas if result is not None else []

    async def view_schema(self, schema_id: Union[int, str]) -> CustomObjectSchema:
        return await self._http.api_operation(
            "GET", f"{CUSTOM_OBJECTS_PREFIX}/schemas/{schema_id}", model=CustomObjectSchema
        )

    async def create_record(self, schema_id: Union[int, str], request: CreateRecordRequest) -> CustomObjectRecord:
        return await self._http.api_operation(
            "POST", self._records_url(schema_id), request, model=CustomObjectRecord
        )

    async def view_record(self, schema_id: Union[int, str], record_id: str) -> CustomObjectRecord:
        return await self._http.api_operation(
            "GET", f"{self._records_url(schema_id)}/{record_id}", model=CustomObjectRecord
        )

    async def update_record(self, schema_id: Union[int, str], record_id: str, request: UpdateRecordRequest) -> CustomObjectRecord:
        return await self._http.api_operation(
            "PUT", f"{self._records_url(schema_id)}/{record_id}", request, model=CustomObjectRecord
        )

    async def delete_record(self, schema_id: Union[int, str], record_id: str) -> None:
        await self._http.api_operation("DELETE", f"{self._records_url(schema_id)}/{record_id}")

    def list_records(
        self,
        schema_id: Union[int, str],
        request: Optional[ListAllRecordsRequest] = None,
        pagination: Optional[TokenBasedPagination] = None,
    ) -> AsyncIterator[CustomObjectRecord]:
        check_pagination(pagination, TokenBasedPagination)
        query = request.get_query() if request is not None else ""
        return self._http.get_paged_results(
            f"{self._records_url(schema_id)}{query}",
            pagination or TokenBasedPagination(),
            CustomObjectRecord,
        )

    async def count_records(self, schema_id: Union[int, str], request: Optional[ListAllRecordsRequest] = None) -> int:
        query = request.get_query() if request is not None else ""
        result = await self._http.api_operation(
            "GET", f"{self._records_url(schema_id)}/count{query}", model=_RecordCount
        )
        return result.count if result is not None else 0
