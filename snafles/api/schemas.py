"""
API Schemas for Snafles

Pydantic models for request validation and response serialization:
- Auth and profile models
- User projections
- Product and vendor models
- Pagination envelopes
- Error models

Design Decisions:
1. camelCase on the wire, snake_case in Python (alias generator)
2. Separate Request/Response: Clear distinction between inputs and outputs
3. No user projection declares a credential field
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from snafles.storage.models import Role


class APIModel(BaseModel):
    """Base for every wire model."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# =============================================================================
# Shared
# =============================================================================

class Address(APIModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None


class Preferences(APIModel):
    newsletter: Optional[bool] = None
    sms_notifications: Optional[bool] = None


class MessageResponse(APIModel):
    message: str


# =============================================================================
# Auth Schemas
# =============================================================================

class RegisterRequest(APIModel):
    """User registration request."""

    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    phone: Optional[str] = Field(None, max_length=30)
    address: Optional[Address] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Sarah Johnson",
                "email": "sarah@example.com",
                "password": "demo123",
                "phone": "+1 (555) 123-4567",
            }
        }
    )


class LoginRequest(APIModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class ProfileUpdate(APIModel):
    """Profile update request (partial). Preferences are merged."""

    name: Optional[str] = Field(None, min_length=2, max_length=100)
    phone: Optional[str] = Field(None, max_length=30)
    address: Optional[Address] = None
    preferences: Optional[Preferences] = None


class ChangePasswordRequest(APIModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=128)


class VerifyPasswordRequest(APIModel):
    password: str = Field(..., min_length=1)


class VerifyPasswordResponse(APIModel):
    is_valid: bool


# =============================================================================
# User Projections
# =============================================================================

class UserSummary(APIModel):
    """Minimal identity returned on login/register."""

    id: str
    name: str
    email: str
    role: Role
    loyalty_points: int = 0


class UserProfile(UserSummary):
    """What users see about themselves."""

    phone: Optional[str] = None
    address: dict[str, Any] = Field(default_factory=dict)
    preferences: dict[str, Any] = Field(default_factory=dict)
    email_verified: bool = False


class UserAdminView(UserProfile):
    """What admins see in listings."""

    is_active: bool = True
    vendor_id: Optional[str] = None
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None


class AuthResponse(APIModel):
    message: str
    token: str
    user: UserSummary


class UserEnvelope(APIModel):
    user: UserProfile


class ProfileUpdateResponse(APIModel):
    message: str
    user: UserProfile


class UserStatusUpdate(APIModel):
    is_active: bool


class AdminUserResponse(APIModel):
    message: str
    user: UserAdminView


# =============================================================================
# Vendor Schemas
# =============================================================================

class VendorResponse(APIModel):
    id: str
    name: str
    description: str
    location: str
    logo: Optional[str] = None
    banner: Optional[str] = None
    categories: list[str] = Field(default_factory=list)
    rating: Optional[float] = None
    reviews: int = 0
    contact: dict[str, Any] = Field(default_factory=dict)
    is_active: bool = True
    is_verified: bool = False
    created_at: Optional[datetime] = None


class VendorStatusUpdate(APIModel):
    is_active: Optional[bool] = None
    is_verified: Optional[bool] = None


class AdminVendorResponse(APIModel):
    message: str
    vendor: VendorResponse


# =============================================================================
# Product Schemas
# =============================================================================

class ReviewCreate(APIModel):
    rating: int = Field(..., ge=1, le=5)
    comment: str = Field(..., min_length=1, max_length=2000)


class ReviewResponse(APIModel):
    user: str
    name: str
    rating: int
    comment: str
    created_at: Optional[datetime] = None


class ProductBase(APIModel):
    id: str
    name: str
    description: str
    detailed_description: Optional[str] = None
    price: float
    original_price: Optional[float] = None
    images: list[str] = Field(default_factory=list)
    category: str
    stock: int = 0
    rating: Optional[float] = None
    reviews: int = 0
    featured: bool = False
    tags: list[str] = Field(default_factory=list)
    specifications: dict[str, str] = Field(default_factory=dict)
    customer_reviews: list[ReviewResponse] = Field(default_factory=list)
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductResponse(ProductBase):
    """Product as listed: vendor is an id."""

    vendor: str


class ProductDetailResponse(ProductBase):
    """Single product: vendor resolved to an object."""

    vendor: Optional[VendorResponse] = None


class VendorDetailResponse(APIModel):
    vendor: VendorResponse
    products: list[ProductResponse]


# =============================================================================
# Pagination Envelopes
# =============================================================================

class PaginationBase(APIModel):
    current_page: int
    total_pages: int
    has_next: bool
    has_prev: bool


class ProductPagination(PaginationBase):
    total_products: int


class VendorPagination(PaginationBase):
    total_vendors: int


class UserPagination(PaginationBase):
    total_users: int


class ProductListResponse(APIModel):
    products: list[ProductResponse]
    pagination: ProductPagination


class VendorListResponse(APIModel):
    vendors: list[VendorResponse]
    pagination: VendorPagination


class UserListResponse(APIModel):
    users: list[UserAdminView]
    pagination: UserPagination


# =============================================================================
# Dashboards
# =============================================================================

class AdminStats(APIModel):
    total_users: int
    total_vendors: int
    total_products: int
    verified_vendors: int
    pending_vendor_approvals: int
    platform_rating: float


class AdminRecentActivity(APIModel):
    users: list[UserAdminView]


class AdminDashboardResponse(APIModel):
    stats: AdminStats
    recent_activity: AdminRecentActivity


class VendorStats(APIModel):
    total_products: int
    active_products: int
    low_stock_products: int
    total_reviews: int
    average_rating: float


class VendorDashboardResponse(APIModel):
    vendor: Optional[VendorResponse] = None
    stats: VendorStats
    recent_products: list[ProductResponse]


# =============================================================================
# Uploads
# =============================================================================

class UploadResponse(APIModel):
    """Placeholder descriptor for an uploaded file."""

    message: str
    url: str
    filename: str
    content_type: str
    size: int


# =============================================================================
# Error / Health
# =============================================================================

class ErrorResponse(APIModel):
    """Standard error response."""

    message: str
    code: str
    errors: Optional[list[dict[str, Any]]] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "message": "Product not found",
                "code": "NOT_FOUND",
            }
        }
    )


class HealthResponse(APIModel):
    status: str = "OK"
    timestamp: datetime
    uptime: float
    message: str = "Mock API Server Running"
