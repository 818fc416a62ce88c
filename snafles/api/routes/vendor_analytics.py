"""
Vendor Analytics API Routes

Vendor-only views over the calling vendor's own catalogue.
"""

from enum import Enum
from typing import Optional

from fastapi import APIRouter, Depends, Query

from snafles.api.dependencies import (
    Settings,
    get_app_settings,
    get_product_repository,
    get_vendor_repository,
    require_role,
)
from snafles.api.schemas import (
    ErrorResponse,
    ProductListResponse,
    VendorDashboardResponse,
    VendorStats,
)
from snafles.api.shaping import product_list, shape_product, shape_vendor
from snafles.query import (
    CollectionQuery,
    SortKey,
    contains_text,
    flag,
    run_query,
    sort_records,
)
from snafles.storage.models import Role, User
from snafles.storage.repository import ProductRepository, VendorRepository


LOW_STOCK_THRESHOLD = 5

router = APIRouter(
    prefix="/vendor/analytics",
    tags=["vendor-analytics"],
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Vendor role required"},
    },
)

vendor_only = require_role(Role.VENDOR)


class ProductStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    LOW_STOCK = "low_stock"


def _status_filter(product_status: Optional[ProductStatus]):
    if product_status == ProductStatus.ACTIVE:
        return flag("is_active", True)
    if product_status == ProductStatus.INACTIVE:
        return flag("is_active", False)
    if product_status == ProductStatus.LOW_STOCK:
        return lambda p: p.stock <= LOW_STOCK_THRESHOLD
    return None


@router.get("/dashboard", response_model=VendorDashboardResponse)
def dashboard(
    vendor_user: User = Depends(vendor_only),
    products: ProductRepository = Depends(get_product_repository),
    vendors: VendorRepository = Depends(get_vendor_repository),
):
    """Catalogue stats for the calling vendor."""
    own = products.by_vendor(vendor_user.vendor_id) if vendor_user.vendor_id else []
    rated = [p.rating for p in own if p.rating is not None]
    vendor = vendors.get(vendor_user.vendor_id) if vendor_user.vendor_id else None

    return VendorDashboardResponse(
        vendor=shape_vendor(vendor) if vendor else None,
        stats=VendorStats(
            total_products=len(own),
            active_products=sum(1 for p in own if p.is_active),
            low_stock_products=sum(1 for p in own if p.stock <= LOW_STOCK_THRESHOLD),
            total_reviews=sum(p.reviews for p in own),
            average_rating=round(sum(rated) / len(rated), 1) if rated else 0.0,
        ),
        recent_products=[shape_product(p) for p in sort_records(own, SortKey.NEWEST)[:5]],
    )


@router.get("/products", response_model=ProductListResponse)
def list_own_products(
    page: int = Query(1),
    limit: Optional[int] = Query(None),
    product_status: Optional[ProductStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None),
    vendor_user: User = Depends(vendor_only),
    products: ProductRepository = Depends(get_product_repository),
    settings: Settings = Depends(get_app_settings),
):
    """The calling vendor's products, newest first."""
    own = products.by_vendor(vendor_user.vendor_id) if vendor_user.vendor_id else []

    result = run_query(
        own,
        CollectionQuery(
            filters=[
                _status_filter(product_status),
                contains_text(("name", "description"), search),
            ],
            sort=SortKey.NEWEST,
            page=page,
            limit=limit,
        ),
        default_limit=settings.default_page_size,
        max_limit=settings.max_page_size,
    )
    return product_list(result.items, result.pagination)
