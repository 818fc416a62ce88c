"""
Record types held by the in-memory repositories.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class Role(str, Enum):
    """Principal roles."""
    CUSTOMER = "customer"
    VENDOR = "vendor"
    ADMIN = "admin"


# Fields that must never leave the process in a response
CREDENTIAL_FIELDS = frozenset({"password_hash"})


@dataclass
class User:
    """An identity record (principal)."""

    id: str
    name: str
    email: str
    password_hash: str
    role: Role = Role.CUSTOMER

    phone: Optional[str] = None
    address: dict[str, Any] = field(default_factory=dict)
    loyalty_points: int = 0
    preferences: dict[str, bool] = field(default_factory=lambda: {
        "newsletter": False,
        "smsNotifications": False,
    })

    is_active: bool = True
    email_verified: bool = False

    # Weak reference to a Vendor for vendor-role users
    vendor_id: Optional[str] = None

    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None


@dataclass
class Review:
    """A customer review attached to a product."""

    user: str
    name: str
    rating: int
    comment: str
    created_at: Optional[datetime] = None


@dataclass
class Product:
    """A product listing."""

    id: str
    name: str
    description: str
    price: float
    category: str
    vendor: str  # Vendor.id, resolved by lookup

    detailed_description: Optional[str] = None
    original_price: Optional[float] = None
    images: list[str] = field(default_factory=list)
    stock: int = 0
    rating: Optional[float] = None
    reviews: int = 0
    featured: bool = False
    tags: list[str] = field(default_factory=list)
    specifications: dict[str, str] = field(default_factory=dict)
    customer_reviews: list[Review] = field(default_factory=list)

    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class Vendor:
    """A seller storefront."""

    id: str
    name: str
    description: str
    location: str

    logo: Optional[str] = None
    banner: Optional[str] = None
    categories: list[str] = field(default_factory=list)
    rating: Optional[float] = None
    reviews: int = 0
    contact: dict[str, Any] = field(default_factory=dict)

    is_active: bool = True
    is_verified: bool = False
    created_at: Optional[datetime] = None
