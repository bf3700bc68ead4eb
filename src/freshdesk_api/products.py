from datetime import datetime
from typing import AsyncIterator, Optional

from pydantic import BaseModel

from .http_client import FreshdeskHttpClient
from .pagination import LIST_STRATEGIES, Pagination, check_pagination


class Product(BaseModel):
    id: Optional[int] = None
    name: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductsClient:
    def __init__(self, http: FreshdeskHttpClient):
        self._http = http

    async def view(self, product_id: int) -> Product:
        return await self._http.api_operation("GET", f"/api/v2/products/{product_id}", model=Product)

    def list_all(self, pagination: Optional[Pagination] = None) -> AsyncIterator[Product]:
        check_pagination(pagination, *LIST_STRATEGIES)
        return self._http.get_paged_results("/api/v2/products", pagination, Product)
