"""
Response shaping.

Converts stored records into wire models:
- User projections with credentials removed
- Products with their vendor reference resolved
- Paginated list envelopes
"""

import dataclasses
from enum import Enum
from typing import Any, Callable, Optional

from snafles.api.schemas import (
    ProductDetailResponse,
    ProductListResponse,
    ProductPagination,
    ProductResponse,
    UserAdminView,
    UserListResponse,
    UserPagination,
    UserProfile,
    UserSummary,
    VendorListResponse,
    VendorPagination,
    VendorResponse,
)
from snafles.query import Pagination
from snafles.storage.models import CREDENTIAL_FIELDS, Product, User, Vendor


class Audience(str, Enum):
    """Who a user projection is for."""
    SUMMARY = "summary"
    SELF = "self"
    ADMIN = "admin"


_USER_MODELS = {
    Audience.SUMMARY: UserSummary,
    Audience.SELF: UserProfile,
    Audience.ADMIN: UserAdminView,
}


def public_fields(user: User) -> dict[str, Any]:
    """User fields with every credential field dropped."""
    data = dataclasses.asdict(user)
    for name in CREDENTIAL_FIELDS:
        data.pop(name, None)
    return data


def shape_user(user: User, audience: Audience = Audience.SELF):
    """Project a user for an audience. Credentials never survive."""
    model = _USER_MODELS[Audience(audience)]
    return model.model_validate(public_fields(user))


def shape_vendor(vendor: Vendor) -> VendorResponse:
    return VendorResponse.model_validate(vendor)


def shape_product(
    product: Product,
    vendor_lookup: Optional[Callable[[str], Optional[Vendor]]] = None,
):
    """
    Project a product.

    With a vendor lookup the weak vendor reference is resolved into an
    embedded object (None when the vendor is gone). Without one the
    vendor id is kept.
    """
    if vendor_lookup is None:
        return ProductResponse.model_validate(product)

    data = dataclasses.asdict(product)
    vendor = vendor_lookup(product.vendor)
    data["vendor"] = shape_vendor(vendor) if vendor else None
    return ProductDetailResponse.model_validate(data)


def _page_fields(pagination: Pagination) -> dict[str, Any]:
    return {
        "current_page": pagination.current_page,
        "total_pages": pagination.total_pages,
        "has_next": pagination.has_next,
        "has_prev": pagination.has_prev,
    }


def product_list(items: list[Product], pagination: Pagination) -> ProductListResponse:
    return ProductListResponse(
        products=[shape_product(p) for p in items],
        pagination=ProductPagination(
            total_products=pagination.total, **_page_fields(pagination)
        ),
    )


def vendor_list(items: list[Vendor], pagination: Pagination) -> VendorListResponse:
    return VendorListResponse(
        vendors=[shape_vendor(v) for v in items],
        pagination=VendorPagination(
            total_vendors=pagination.total, **_page_fields(pagination)
        ),
    )


def user_list(items: list[User], pagination: Pagination) -> UserListResponse:
    return UserListResponse(
        users=[shape_user(u, Audience.ADMIN) for u in items],
        pagination=UserPagination(
            total_users=pagination.total, **_page_fields(pagination)
        ),
    )
