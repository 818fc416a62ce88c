"""
API Routes for Snafles

Route modules:
- auth: Registration, login, profile and password
- products: Product browsing and reviews
- vendors: Vendor browsing
- users: Self-service profile
- admin: Admin dashboard and moderation
- vendor_analytics: Vendor-only catalogue views
- uploads: Image upload placeholder
"""

from snafles.api.routes.auth import router as auth_router
from snafles.api.routes.products import router as products_router
from snafles.api.routes.vendors import router as vendors_router
from snafles.api.routes.users import router as users_router
from snafles.api.routes.admin import router as admin_router
from snafles.api.routes.vendor_analytics import router as vendor_analytics_router
from snafles.api.routes.uploads import router as uploads_router

__all__ = [
    "auth_router",
    "products_router",
    "vendors_router",
    "users_router",
    "admin_router",
    "vendor_analytics_router",
    "uploads_router",
]
