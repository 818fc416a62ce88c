"""
Pytest configuration and fixtures for Snafles tests.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from snafles.api.main import create_app
from snafles.api.dependencies import ServiceContainer, Settings
from snafles.security import TokenCodec
from snafles.storage.fixtures import sample_products, sample_users, sample_vendors
from snafles.storage.repository import ProductRepository, UserRepository, VendorRepository


TEST_SECRET = "test-secret-key"

# Cheapest bcrypt cost; keeps fixture seeding fast
TEST_HASH_ROUNDS = 4


# =============================================================================
# Test Settings
# =============================================================================

def get_test_settings(**overrides) -> Settings:
    """Return settings configured for testing."""
    values = dict(
        jwt_secret=TEST_SECRET,
        password_hash_rounds=TEST_HASH_ROUNDS,
        environment="test",
        debug=True,
        rate_limit_enabled=False,
        seed_fixtures=True,
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings() -> Settings:
    return get_test_settings()


# =============================================================================
# Storage Fixtures
# =============================================================================

@pytest.fixture
def users() -> UserRepository:
    """Fresh user repository seeded with the sample users."""
    return UserRepository(sample_users(hash_rounds=TEST_HASH_ROUNDS))


@pytest.fixture
def products() -> ProductRepository:
    return ProductRepository(sample_products())


@pytest.fixture
def vendors() -> VendorRepository:
    return VendorRepository(sample_vendors())


@pytest.fixture
def codec() -> TokenCodec:
    return TokenCodec(secret=TEST_SECRET)


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest_asyncio.fixture(scope="function")
async def app(settings):
    """Create FastAPI application with its own in-memory data."""
    application = create_app(settings)
    yield application


@pytest.fixture
def services(app) -> ServiceContainer:
    """Service container behind the test application."""
    return app.state.services


@pytest_asyncio.fixture(scope="function")
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client for API tests."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# =============================================================================
# Auth Fixtures
# =============================================================================

def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def customer_headers(services) -> dict:
    """Headers for Sarah Johnson (customer, id 1)."""
    return bearer(services.token_codec.issue("1"))


@pytest.fixture
def admin_headers(services) -> dict:
    """Headers for the platform admin (id 3)."""
    return bearer(services.token_codec.issue("3"))


@pytest.fixture
def vendor_headers(services) -> dict:
    """Headers for the Artisan Crafts vendor user (id 4)."""
    return bearer(services.token_codec.issue("4"))
