"""
Snafles Mock API - FastAPI Backend.

In-memory e-commerce backend for frontend development.
"""

from .main import app, create_app, main
from .dependencies import (
    Settings,
    get_settings,
    get_service_container,
    ServiceContainer,
)
from .schemas import (
    AuthResponse,
    ProductResponse,
    ProductDetailResponse,
    ProductListResponse,
    VendorResponse,
    VendorListResponse,
    UserProfile,
    HealthResponse,
    ErrorResponse,
)

__all__ = [
    # Application
    "app",
    "create_app",
    "main",
    # Dependencies
    "Settings",
    "get_settings",
    "get_service_container",
    "ServiceContainer",
    # Schemas
    "AuthResponse",
    "ProductResponse",
    "ProductDetailResponse",
    "ProductListResponse",
    "VendorResponse",
    "VendorListResponse",
    "UserProfile",
    "HealthResponse",
    "ErrorResponse",
]
