"""
Sample data loaded into the repositories at startup.

Everything here lives for the lifetime of the process only.
"""

from datetime import datetime, timezone

from snafles.security import DEFAULT_HASH_ROUNDS, get_password_hash
from snafles.storage.models import Product, Review, Role, User, Vendor


def _ts(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, tzinfo=timezone.utc)


# (id, name, email, password, role, extra)
SAMPLE_USERS = [
    (
        "1", "Sarah Johnson", "demo@snafles.com", "demo123", Role.CUSTOMER,
        {
            "phone": "+1 (555) 123-4567",
            "address": {
                "street": "123 Demo Street",
                "city": "Demo City",
                "state": "CA",
                "zipCode": "90210",
                "country": "US",
            },
            "loyalty_points": 1250,
            "preferences": {"newsletter": True, "smsNotifications": False},
            "email_verified": True,
            "created_at": _ts(2024, 1, 10),
        },
    ),
    (
        "2", "Test User", "testexample@gmail.com", "123", Role.CUSTOMER,
        {
            "phone": "+1 (555) 987-6543",
            "address": {
                "street": "456 Test Avenue",
                "city": "Test City",
                "state": "NY",
                "zipCode": "10001",
                "country": "US",
            },
            "created_at": _ts(2024, 2, 3),
        },
    ),
    (
        "3", "Platform Admin", "admin@snafles.com", "admin123", Role.ADMIN,
        {"email_verified": True, "created_at": _ts(2023, 12, 1)},
    ),
    (
        "4", "Priya Sharma", "vendor@artisancrafts.com", "vendor123", Role.VENDOR,
        {
            "phone": "+91 98765 43210",
            "vendor_id": "vendor-001",
            "email_verified": True,
            "created_at": _ts(2023, 12, 15),
        },
    ),
]


def sample_users(hash_rounds: int = DEFAULT_HASH_ROUNDS) -> list[User]:
    """Build the sample users, hashing their passwords."""
    users = []
    for user_id, name, email, password, role, extra in SAMPLE_USERS:
        users.append(User(
            id=user_id,
            name=name,
            email=email,
            password_hash=get_password_hash(password, rounds=hash_rounds),
            role=role,
            **extra,
        ))
    return users


def sample_vendors() -> list[Vendor]:
    return [
        Vendor(
            id="vendor-001",
            name="Artisan Crafts Co.",
            description="Traditional Indian handicrafts and jewelry",
            logo="https://images.unsplash.com/photo-1507003211169-0a1dd7228f2d?w=400&h=300&fit=crop",
            banner="https://images.unsplash.com/photo-1507003211169-0a1dd7228f2d?w=800&h=400&fit=crop",
            location="Mumbai, India",
            categories=["Jewelry", "Art"],
            rating=4.8,
            reviews=45,
            contact={
                "email": "contact@artisancrafts.com",
                "phone": "+91 98765 43210",
                "website": "https://artisancrafts.com",
                "socialMedia": {
                    "facebook": "https://facebook.com/artisancrafts",
                    "instagram": "https://instagram.com/artisancrafts",
                },
            },
            is_verified=True,
            created_at=_ts(2023, 11, 20),
        ),
        Vendor(
            id="vendor-002",
            name="Creative Home Studio",
            description="Modern home decor and accessories",
            logo="https://images.unsplash.com/photo-1507003211169-0a1dd7228f2d?w=400&h=300&fit=crop",
            banner="https://images.unsplash.com/photo-1507003211169-0a1dd7228f2d?w=800&h=400&fit=crop",
            location="Delhi, India",
            categories=["Decor", "Home"],
            rating=4.7,
            reviews=32,
            contact={
                "email": "hello@creativehomestudio.com",
                "phone": "+91 98765 43211",
                "website": "https://creativehomestudio.com",
                "socialMedia": {
                    "facebook": "https://facebook.com/creativehomestudio",
                    "instagram": "https://instagram.com/creativehomestudio",
                },
            },
            is_verified=True,
            created_at=_ts(2024, 1, 5),
        ),
        Vendor(
            id="vendor-003",
            name="Jaipur Block Prints",
            description="Hand block printed textiles",
            location="Jaipur, India",
            categories=["Clothing", "Home"],
            is_verified=False,
            created_at=_ts(2024, 3, 2),
        ),
    ]


def sample_products() -> list[Product]:
    return [
        Product(
            id="jewelry-001",
            name="Handmade Pearl Necklace",
            description="Beautiful handmade pearl necklace with silver chain",
            detailed_description=(
                "This exquisite pearl necklace features high-quality freshwater "
                "pearls strung on a sterling silver chain. Each pearl is carefully "
                "selected for its luster and shape, creating a timeless piece that "
                "complements any outfit."
            ),
            price=89.99,
            original_price=120.00,
            images=["https://images.unsplash.com/photo-1515562141207-7a88fb7ce338?w=400&h=400&fit=crop"],
            category="Jewelry",
            vendor="vendor-001",
            stock=15,
            rating=4.8,
            reviews=23,
            featured=True,
            tags=["pearl", "necklace", "handmade", "silver"],
            specifications={
                "material": "Freshwater Pearls, Sterling Silver",
                "length": "18 inches",
                "weight": "25g",
            },
            customer_reviews=[
                Review(
                    user="1",
                    name="Sarah Johnson",
                    rating=5,
                    comment=(
                        "Absolutely beautiful! The pearls are so lustrous and "
                        "the craftsmanship is excellent."
                    ),
                    created_at=_ts(2024, 2, 14),
                ),
            ],
            created_at=_ts(2024, 1, 12),
            updated_at=_ts(2024, 2, 14),
        ),
        Product(
            id="decor-001",
            name="Ceramic Vase",
            description="Modern ceramic vase perfect for home decoration",
            detailed_description=(
                "This contemporary ceramic vase features a sleek design with a "
                "matte finish. Perfect for displaying fresh flowers or as a "
                "standalone decorative piece."
            ),
            price=45.99,
            images=["https://images.unsplash.com/photo-1578662996442-48f60103fc96?w=400&h=400&fit=crop"],
            category="Decor",
            vendor="vendor-002",
            stock=8,
            rating=4.7,
            reviews=12,
            featured=True,
            tags=["ceramic", "vase", "modern", "decor"],
            specifications={
                "material": "Ceramic",
                "height": "12 inches",
                "diameter": "6 inches",
            },
            created_at=_ts(2024, 2, 1),
            updated_at=_ts(2024, 2, 1),
        ),
        Product(
            id="clothing-001",
            name="Boho Silver Earrings",
            description="Stylish boho silver earrings with intricate design",
            detailed_description=(
                "These stunning boho-style earrings feature intricate silver work "
                "with a bohemian flair. Perfect for adding a touch of elegance to "
                "any outfit."
            ),
            price=25.99,
            images=["https://images.unsplash.com/photo-1635767798704-3e94c9e53928?w=400&h=400&fit=crop"],
            category="Jewelry",
            vendor="vendor-001",
            stock=28,
            rating=4.6,
            reviews=15,
            featured=False,
            tags=["earrings", "silver", "boho", "jewelry"],
            specifications={
                "material": "Sterling Silver",
                "length": "2 inches",
                "weight": "8g",
            },
            created_at=_ts(2024, 3, 8),
            updated_at=_ts(2024, 3, 8),
        ),
        Product(
            id="art-001",
            name="Madhubani Wall Painting",
            description="Hand painted folk art on handmade paper",
            price=129.00,
            category="Art",
            vendor="vendor-001",
            stock=3,
            featured=False,
            tags=["painting", "folk", "handmade"],
        ),
    ]
