"""
Vendor API Routes

Vendor browsing and vendor storefront detail.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from loguru import logger

from snafles.api.dependencies import (
    Settings,
    get_app_settings,
    get_product_repository,
    get_vendor_repository,
)
from snafles.api.schemas import ErrorResponse, VendorDetailResponse, VendorListResponse
from snafles.api.shaping import shape_product, shape_vendor, vendor_list
from snafles.query import (
    CollectionQuery,
    SortKey,
    contains_text,
    flag,
    has_member,
    run_query,
)
from snafles.storage.repository import ProductRepository, VendorRepository


router = APIRouter(prefix="/vendors", tags=["vendors"])


@router.get("", response_model=VendorListResponse)
def list_vendors(
    page: int = Query(1),
    limit: Optional[int] = Query(None),
    category: Optional[str] = Query(None, description="Vendor sells in this category"),
    location: Optional[str] = Query(None, description="Substring of location"),
    verified: Optional[bool] = Query(None),
    search: Optional[str] = Query(None, description="Substring of name or description"),
    sort_by: SortKey = Query(SortKey.NAME, alias="sortBy"),
    repo: VendorRepository = Depends(get_vendor_repository),
    settings: Settings = Depends(get_app_settings),
):
    """List active vendors with filtering and pagination."""
    logger.info(f"Listing vendors: page={page} limit={limit} category={category}")

    result = run_query(
        repo.filter(lambda v: v.is_active),
        CollectionQuery(
            filters=[
                has_member("categories", category),
                contains_text(("location",), location),
                contains_text(("name", "description"), search),
                flag("is_verified", True) if verified else None,
            ],
            sort=sort_by,
            page=page,
            limit=limit,
        ),
        default_limit=settings.default_page_size,
        max_limit=settings.max_page_size,
    )
    return vendor_list(result.items, result.pagination)


@router.get(
    "/{vendor_id}",
    response_model=VendorDetailResponse,
    responses={404: {"model": ErrorResponse, "description": "Vendor not found"}},
)
def get_vendor(
    vendor_id: str,
    repo: VendorRepository = Depends(get_vendor_repository),
    products: ProductRepository = Depends(get_product_repository),
):
    """Get a vendor and the products it sells."""
    vendor = repo.require(vendor_id)
    return VendorDetailResponse(
        vendor=shape_vendor(vendor),
        products=[shape_product(p) for p in products.by_vendor(vendor_id)],
    )
