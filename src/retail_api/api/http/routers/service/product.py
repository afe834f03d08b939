"""Product API router with CRUD, search and analytics operations."""

from fastapi import APIRouter, Body, Depends, Query, status

from retail_api.api.http.deps import get_product_service
from retail_api.api.http.responses import ApiResponse, ErrorResponse
from retail_api.core.services.product_service import ProductService, normalize_query
from retail_api.entities.service.product import (
    LowStockProduct,
    Product,
    ProductInput,
    ProductSummary,
)

router = APIRouter(prefix="/api/products", tags=["Products"])

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Product not found"}}
_BAD_REQUEST = {400: {"model": ErrorResponse, "description": "Invalid input"}}
_CONFLICT = {409: {"model": ErrorResponse, "description": "Duplicate stock_code"}}


@router.get("", response_model=ApiResponse[list[Product]], responses=_BAD_REQUEST)
def list_products(
    page: int = Query(default=1, ge=1, description="1-based page number"),
    limit: int = Query(default=10, ge=1, description="Page size"),
    search: str = Query(
        default="", description="Case-insensitive match on stock_code or description"
    ),
    sort_by: str = Query(
        default="stock_code",
        description="product_id, stock_code, description or unit_price",
    ),
    sort_order: str = Query(default="ASC", description="ASC or DESC"),
    service: ProductService = Depends(get_product_service),
) -> ApiResponse[list[Product]]:
    """Returns all products with pagination, search, and sorting.

    Unknown ``sort_by`` values sort by ``stock_code``; any ``sort_order``
    other than ``DESC`` sorts ascending.
    """
    query = normalize_query(page, limit, search, sort_by, sort_order)
    return ApiResponse(data=service.list_products(query))


@router.get("/analytics/summary", response_model=ApiResponse[ProductSummary])
def analytics_summary(
    service: ProductService = Depends(get_product_service),
) -> ApiResponse[ProductSummary]:
    """Get summary analytics of products."""
    return ApiResponse(data=service.analytics_summary())


@router.get("/low-stock", response_model=ApiResponse[list[LowStockProduct]])
def low_stock(
    service: ProductService = Depends(get_product_service),
) -> ApiResponse[list[LowStockProduct]]:
    """Get products whose stock is at or below their reorder level."""
    return ApiResponse(data=service.low_stock())


@router.get("/{identifier}", response_model=ApiResponse[Product], responses=_NOT_FOUND)
def get_product(
    identifier: str,
    service: ProductService = Depends(get_product_service),
) -> ApiResponse[Product]:
    """Get a product by numeric product_id or by stock_code."""
    return ApiResponse(data=service.get_by_identifier(identifier))


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[Product],
    responses={**_BAD_REQUEST, **_CONFLICT},
)
def create_product(
    payload: ProductInput = Body(...),
    service: ProductService = Depends(get_product_service),
) -> ApiResponse[Product]:
    """Add a new product."""
    return ApiResponse(data=service.create(payload))


@router.put(
    "/{product_id}",
    response_model=ApiResponse[Product],
    responses={**_BAD_REQUEST, **_NOT_FOUND, **_CONFLICT},
)
def update_product(
    product_id: str,
    payload: ProductInput = Body(...),
    service: ProductService = Depends(get_product_service),
) -> ApiResponse[Product]:
    """Replace stock_code, description and unit_price of a product by product_id."""
    return ApiResponse(data=service.update(product_id, payload))


@router.delete(
    "/{product_id}",
    response_model=ApiResponse[Product],
    responses={**_BAD_REQUEST, **_NOT_FOUND},
)
def delete_product(
    product_id: str,
    service: ProductService = Depends(get_product_service),
) -> ApiResponse[Product]:
    """Delete a product by product_id."""
    return ApiResponse(message="Product deleted", data=service.delete(product_id))
