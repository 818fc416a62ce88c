"""
Storage Module for Snafles

In-memory record storage:
- Record types (users, products, vendors, reviews)
- Lock-guarded repositories
- Sample fixtures loaded at startup
"""

from snafles.storage.models import (
    CREDENTIAL_FIELDS,
    Product,
    Review,
    Role,
    User,
    Vendor,
)
from snafles.storage.repository import (
    InMemoryRepository,
    ProductRepository,
    UserRepository,
    VendorRepository,
)

__all__ = [
    # Models
    "CREDENTIAL_FIELDS",
    "Product",
    "Review",
    "Role",
    "User",
    "Vendor",
    # Repositories
    "InMemoryRepository",
    "ProductRepository",
    "UserRepository",
    "VendorRepository",
]
