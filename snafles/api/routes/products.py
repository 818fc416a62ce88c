"""
Product API Routes

Product browsing (filter, sort, paginate), product detail with vendor
resolution, and customer reviews.
"""

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from loguru import logger

from snafles.api.dependencies import (
    Settings,
    get_app_settings,
    get_current_user,
    get_product_repository,
    get_vendor_repository,
)
from snafles.api.schemas import (
    ErrorResponse,
    ProductDetailResponse,
    ProductListResponse,
    ReviewCreate,
)
from snafles.api.shaping import product_list, shape_product
from snafles.query import (
    CollectionQuery,
    SortKey,
    contains_text,
    equals,
    flag,
    run_query,
    within_range,
)
from snafles.storage.models import Review, User
from snafles.storage.repository import ProductRepository, VendorRepository


router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=ProductListResponse)
def list_products(
    page: int = Query(1, description="Page number (values below 1 mean 1)"),
    limit: Optional[int] = Query(None, description="Items per page"),
    category: Optional[str] = Query(None, description="Exact category, 'all' for any"),
    search: Optional[str] = Query(None, description="Substring of name, description or tags"),
    featured: Optional[bool] = Query(None),
    min_price: Optional[float] = Query(None, alias="minPrice", allow_inf_nan=False),
    max_price: Optional[float] = Query(None, alias="maxPrice", allow_inf_nan=False),
    sort_by: SortKey = Query(SortKey.NAME, alias="sortBy"),
    repo: ProductRepository = Depends(get_product_repository),
    settings: Settings = Depends(get_app_settings),
):
    """List active products with filtering, sorting and pagination."""
    logger.info(
        f"Listing products: page={page} limit={limit} category={category} "
        f"search={search!r} sort={sort_by.value}"
    )

    result = run_query(
        repo.filter(lambda p: p.is_active),
        CollectionQuery(
            filters=[
                equals("category", None if category == "all" else category),
                contains_text(("name", "description", "tags"), search),
                within_range("price", min_price, max_price),
                # featured=false matches everything
                flag("featured", True) if featured else None,
            ],
            sort=sort_by,
            page=page,
            limit=limit,
        ),
        default_limit=settings.default_page_size,
        max_limit=settings.max_page_size,
    )
    return product_list(result.items, result.pagination)


@router.get(
    "/{product_id}",
    response_model=ProductDetailResponse,
    responses={404: {"model": ErrorResponse, "description": "Product not found"}},
)
def get_product(
    product_id: str,
    repo: ProductRepository = Depends(get_product_repository),
    vendors: VendorRepository = Depends(get_vendor_repository),
):
    """Get a product with its vendor embedded."""
    product = repo.require(product_id)
    return shape_product(product, vendor_lookup=vendors.get)


@router.post(
    "/{product_id}/reviews",
    response_model=ProductDetailResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse, "description": "Product not found"}},
)
def add_review(
    product_id: str,
    body: ReviewCreate,
    current_user: User = Depends(get_current_user),
    repo: ProductRepository = Depends(get_product_repository),
    vendors: VendorRepository = Depends(get_vendor_repository),
):
    """Add a review and update the product's rating."""
    product = repo.add_review(
        product_id,
        Review(
            user=current_user.id,
            name=current_user.name,
            rating=body.rating,
            comment=body.comment,
            created_at=datetime.now(timezone.utc),
        ),
    )
    return shape_product(product, vendor_lookup=vendors.get)
