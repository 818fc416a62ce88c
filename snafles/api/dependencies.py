"""
Dependency injection for FastAPI routes.

Provides injectable dependencies for:
- Configuration
- Repositories and auth services
- Authentication and role checks
- Request context
"""

import os
import threading
from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from loguru import logger

from snafles import auth
from snafles.auth import PrincipalResolver
from snafles.security import ALGORITHM, DEFAULT_HASH_ROUNDS, TokenCodec
from snafles.storage.models import Role, User
from snafles.storage.repository import (
    ProductRepository,
    UserRepository,
    VendorRepository,
)


DEFAULT_JWT_SECRET = "your_jwt_secret_key_here"


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class Settings:
    """Application settings loaded from environment."""

    # Auth
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = ALGORITHM
    token_expire_days: int = 7
    password_hash_rounds: int = DEFAULT_HASH_ROUNDS

    # Listing
    default_page_size: int = 20
    max_page_size: int = 100

    # Rate limiting (100 requests per 15 minutes per client)
    rate_limit_enabled: bool = True
    rate_limit_max_requests: int = 100
    rate_limit_window_seconds: int = 900

    # Frontend
    frontend_url: str = "http://localhost:5173"

    # File uploads
    max_upload_size_mb: int = 10
    allowed_image_types: str = "image/jpeg,image/png,image/webp,image/gif"

    # Data
    seed_fixtures: bool = True

    # Environment
    environment: str = "development"
    debug: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        return cls(
            jwt_secret=os.getenv("JWT_SECRET", cls.jwt_secret),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", cls.jwt_algorithm),
            token_expire_days=int(os.getenv("TOKEN_EXPIRE_DAYS", cls.token_expire_days)),
            password_hash_rounds=int(os.getenv("PASSWORD_HASH_ROUNDS", cls.password_hash_rounds)),
            default_page_size=int(os.getenv("DEFAULT_PAGE_SIZE", cls.default_page_size)),
            max_page_size=int(os.getenv("MAX_PAGE_SIZE", cls.max_page_size)),
            rate_limit_enabled=os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true",
            rate_limit_max_requests=int(os.getenv("RATE_LIMIT_MAX_REQUESTS", cls.rate_limit_max_requests)),
            rate_limit_window_seconds=int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", cls.rate_limit_window_seconds)),
            frontend_url=os.getenv("FRONTEND_URL", cls.frontend_url),
            max_upload_size_mb=int(os.getenv("MAX_UPLOAD_SIZE_MB", cls.max_upload_size_mb)),
            allowed_image_types=os.getenv("ALLOWED_IMAGE_TYPES", cls.allowed_image_types),
            seed_fixtures=os.getenv("SEED_FIXTURES", "true").lower() == "true",
            environment=os.getenv("SNAFLES_ENV", cls.environment),
            debug=os.getenv("DEBUG", "true").lower() == "true",
        )

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings.from_env()


# =============================================================================
# Service Container
# =============================================================================

class ServiceContainer:
    """
    Holds the per-application repositories and auth services.

    Repositories are seeded from the sample fixtures on first access
    unless ``settings.seed_fixtures`` is off.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        # Sync routes run in a threadpool; seed each repository once
        self._seed_lock = threading.Lock()
        self._user_repository = None
        self._product_repository = None
        self._vendor_repository = None
        self._token_codec = None
        self._principal_resolver = None

    @property
    def user_repository(self) -> UserRepository:
        """Get user repository instance."""
        if self._user_repository is None:
            with self._seed_lock:
                if self._user_repository is None:
                    users = []
                    if self.settings.seed_fixtures:
                        from snafles.storage.fixtures import sample_users
                        users = sample_users(hash_rounds=self.settings.password_hash_rounds)
                    logger.info(f"Seeded {len(users)} users")
                    self._user_repository = UserRepository(users)
        return self._user_repository

    @property
    def product_repository(self) -> ProductRepository:
        """Get product repository instance."""
        if self._product_repository is None:
            with self._seed_lock:
                if self._product_repository is None:
                    products = []
                    if self.settings.seed_fixtures:
                        from snafles.storage.fixtures import sample_products
                        products = sample_products()
                    logger.info(f"Seeded {len(products)} products")
                    self._product_repository = ProductRepository(products)
        return self._product_repository

    @property
    def vendor_repository(self) -> VendorRepository:
        """Get vendor repository instance."""
        if self._vendor_repository is None:
            with self._seed_lock:
                if self._vendor_repository is None:
                    vendors = []
                    if self.settings.seed_fixtures:
                        from snafles.storage.fixtures import sample_vendors
                        vendors = sample_vendors()
                    logger.info(f"Seeded {len(vendors)} vendors")
                    self._vendor_repository = VendorRepository(vendors)
        return self._vendor_repository

    @property
    def token_codec(self) -> TokenCodec:
        """Get token codec instance."""
        if self._token_codec is None:
            self._token_codec = TokenCodec(
                secret=self.settings.jwt_secret,
                algorithm=self.settings.jwt_algorithm,
                expires_delta=timedelta(days=self.settings.token_expire_days),
            )
        return self._token_codec

    @property
    def principal_resolver(self) -> PrincipalResolver:
        """Get principal resolver instance."""
        if self._principal_resolver is None:
            self._principal_resolver = PrincipalResolver(
                codec=self.token_codec,
                users=self.user_repository,
            )
        return self._principal_resolver


def init_services(settings: Settings) -> ServiceContainer:
    """Create a service container. Repositories seed on first use."""
    container = ServiceContainer(settings)
    logger.info(f"Service container ready (seed_fixtures={settings.seed_fixtures})")
    return container


def get_service_container(request: Request) -> ServiceContainer:
    """Get the service container bound to the running app."""
    return request.app.state.services


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was created with."""
    return request.app.state.settings


# =============================================================================
# Individual Service Dependencies
# =============================================================================

def get_user_repository(
    container: ServiceContainer = Depends(get_service_container),
) -> UserRepository:
    """Dependency for user repository."""
    return container.user_repository


def get_product_repository(
    container: ServiceContainer = Depends(get_service_container),
) -> ProductRepository:
    """Dependency for product repository."""
    return container.product_repository


def get_vendor_repository(
    container: ServiceContainer = Depends(get_service_container),
) -> VendorRepository:
    """Dependency for vendor repository."""
    return container.vendor_repository


def get_principal_resolver(
    container: ServiceContainer = Depends(get_service_container),
) -> PrincipalResolver:
    """Dependency for principal resolver."""
    return container.principal_resolver


# =============================================================================
# Authentication Dependencies
# =============================================================================

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    resolver: PrincipalResolver = Depends(get_principal_resolver),
) -> User:
    """
    Resolve the bearer token to a user and attach it to the request.

    Raises:
        Unauthenticated, InvalidToken, ExpiredToken, PrincipalNotFound,
        Forbidden (deactivated account).
    """
    token = credentials.credentials if credentials else None
    user = resolver.resolve(token)
    request.state.user = user
    return user


def require_role(role: Role):
    """
    Build a dependency that only lets users with ``role`` through.

    Usage:
        @router.get("/dashboard")
        def dashboard(admin: User = Depends(require_role(Role.ADMIN))):
            ...
    """

    def _dependency(user: User = Depends(get_current_user)) -> User:
        auth.require_role(user, role)
        return user

    return _dependency


# =============================================================================
# Request Context Dependencies
# =============================================================================

def get_client_ip(request: Request) -> str:
    """Extract client IP from request, considering proxies."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    if request.client:
        return request.client.host

    return "unknown"
