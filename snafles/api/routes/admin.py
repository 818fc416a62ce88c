"""
Admin API Routes

Admin-only endpoints:
- Dashboard statistics
- User listing (role, status, search) and activation
- Vendor listing (verification status, search), activation and verification
"""

from enum import Enum
from typing import Optional

from fastapi import APIRouter, Depends, Query
from loguru import logger

from snafles.api.dependencies import (
    Settings,
    get_app_settings,
    get_product_repository,
    get_user_repository,
    get_vendor_repository,
    require_role,
)
from snafles.api.schemas import (
    AdminDashboardResponse,
    AdminRecentActivity,
    AdminStats,
    AdminUserResponse,
    AdminVendorResponse,
    ErrorResponse,
    UserListResponse,
    UserStatusUpdate,
    VendorListResponse,
    VendorStatusUpdate,
)
from snafles.api.shaping import Audience, shape_user, shape_vendor, user_list, vendor_list
from snafles.errors import ValidationError
from snafles.query import (
    CollectionQuery,
    SortKey,
    contains_text,
    equals,
    flag,
    run_query,
    sort_records,
)
from snafles.storage.models import Role, User
from snafles.storage.repository import (
    ProductRepository,
    UserRepository,
    VendorRepository,
)


router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Admin role required"},
    },
)

admin_only = require_role(Role.ADMIN)


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class VendorStatus(str, Enum):
    VERIFIED = "verified"
    UNVERIFIED = "unverified"


def _status_flag(field_name: str, status: Optional[Enum], truthy: Enum):
    """Map a two-valued status query onto a boolean flag filter."""
    return flag(field_name, None if status is None else status == truthy)


@router.get("/dashboard", response_model=AdminDashboardResponse)
def dashboard(
    admin: User = Depends(admin_only),
    users: UserRepository = Depends(get_user_repository),
    products: ProductRepository = Depends(get_product_repository),
    vendors: VendorRepository = Depends(get_vendor_repository),
):
    """Platform-wide counts and recent signups."""
    active_products = products.filter(lambda p: p.is_active)
    rated = [p.rating for p in active_products if p.rating is not None]
    platform_rating = round(sum(rated) / len(rated), 1) if rated else 0.0

    # Vendor stats count vendor-role users; verification lives on the storefront
    vendor_users = users.filter(lambda u: u.role == Role.VENDOR)
    verified = 0
    for vendor_user in vendor_users:
        storefront = vendors.get(vendor_user.vendor_id) if vendor_user.vendor_id else None
        if storefront is not None and storefront.is_verified:
            verified += 1

    customers = users.filter(lambda u: u.role == Role.CUSTOMER)
    recent = sort_records(customers, SortKey.NEWEST)[:5]

    return AdminDashboardResponse(
        stats=AdminStats(
            total_users=len(customers),
            total_vendors=len(vendor_users),
            total_products=len(active_products),
            verified_vendors=verified,
            pending_vendor_approvals=len(vendor_users) - verified,
            platform_rating=platform_rating,
        ),
        recent_activity=AdminRecentActivity(
            users=[shape_user(u, Audience.ADMIN) for u in recent],
        ),
    )


@router.get("/users", response_model=UserListResponse)
def list_users(
    page: int = Query(1),
    limit: Optional[int] = Query(None),
    role: Optional[Role] = Query(None),
    user_status: Optional[UserStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None, description="Substring of name or email"),
    admin: User = Depends(admin_only),
    users: UserRepository = Depends(get_user_repository),
    settings: Settings = Depends(get_app_settings),
):
    """List users, newest first."""
    result = run_query(
        users.all(),
        CollectionQuery(
            filters=[
                equals("role", role),
                _status_flag("is_active", user_status, UserStatus.ACTIVE),
                contains_text(("name", "email"), search),
            ],
            sort=SortKey.NEWEST,
            page=page,
            limit=limit,
        ),
        default_limit=settings.default_page_size,
        max_limit=settings.max_page_size,
    )
    return user_list(result.items, result.pagination)


@router.get("/vendors", response_model=VendorListResponse)
def list_vendors(
    page: int = Query(1),
    limit: Optional[int] = Query(None),
    vendor_status: Optional[VendorStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None, description="Substring of name or description"),
    admin: User = Depends(admin_only),
    vendors: VendorRepository = Depends(get_vendor_repository),
    settings: Settings = Depends(get_app_settings),
):
    """List every vendor, inactive ones included, newest first."""
    result = run_query(
        vendors.all(),
        CollectionQuery(
            filters=[
                _status_flag("is_verified", vendor_status, VendorStatus.VERIFIED),
                contains_text(("name", "description"), search),
            ],
            sort=SortKey.NEWEST,
            page=page,
            limit=limit,
        ),
        default_limit=settings.default_page_size,
        max_limit=settings.max_page_size,
    )
    return vendor_list(result.items, result.pagination)


@router.put(
    "/users/{user_id}/status",
    response_model=AdminUserResponse,
    responses={404: {"model": ErrorResponse, "description": "User not found"}},
)
def update_user_status(
    user_id: str,
    body: UserStatusUpdate,
    admin: User = Depends(admin_only),
    users: UserRepository = Depends(get_user_repository),
):
    """Activate or deactivate a user."""
    if user_id == admin.id and not body.is_active:
        raise ValidationError("Admins cannot deactivate their own account")

    user = users.update(user_id, is_active=body.is_active)
    logger.info(f"Admin {admin.id} set user {user_id} is_active={body.is_active}")
    return AdminUserResponse(
        message="User status updated successfully",
        user=shape_user(user, Audience.ADMIN),
    )


@router.put(
    "/vendors/{vendor_id}/status",
    response_model=AdminVendorResponse,
    responses={404: {"model": ErrorResponse, "description": "Vendor not found"}},
)
def update_vendor_status(
    vendor_id: str,
    body: VendorStatusUpdate,
    admin: User = Depends(admin_only),
    vendors: VendorRepository = Depends(get_vendor_repository),
):
    """Activate, deactivate or verify a vendor."""
    changes = body.model_dump(exclude_none=True)
    if not changes:
        raise ValidationError("Nothing to update", detail="Provide isActive or isVerified")

    vendor = vendors.update(vendor_id, **changes)
    logger.info(f"Admin {admin.id} updated vendor {vendor_id}: {changes}")
    return AdminVendorResponse(
        message="Vendor status updated successfully",
        vendor=shape_vendor(vendor),
    )
