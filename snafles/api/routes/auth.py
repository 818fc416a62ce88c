"""
Authentication API Routes for Snafles.

Handles:
- User registration
- Customer and vendor login (token issuance)
- Current user retrieval and profile updates
- Password change and verification
"""

import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from loguru import logger

from snafles.api.dependencies import (
    Settings,
    get_app_settings,
    get_current_user,
    get_principal_resolver,
    get_user_repository,
)
from snafles.api.schemas import (
    AuthResponse,
    ChangePasswordRequest,
    ErrorResponse,
    LoginRequest,
    MessageResponse,
    ProfileUpdate,
    ProfileUpdateResponse,
    RegisterRequest,
    UserEnvelope,
    VerifyPasswordRequest,
    VerifyPasswordResponse,
)
from snafles.api.shaping import Audience, shape_user
from snafles.auth import PrincipalResolver
from snafles.errors import ConflictError, InvalidCredentials
from snafles.security import get_password_hash, verify_password
from snafles.storage.models import Role, User
from snafles.storage.repository import UserRepository

router = APIRouter(prefix="/auth", tags=["auth"])


def apply_profile_update(
    user: User,
    update: ProfileUpdate,
    users: UserRepository,
) -> User:
    """Apply a partial profile update. Preferences merge into the existing ones."""
    changes = {}
    if update.name:
        changes["name"] = update.name
    if update.phone:
        changes["phone"] = update.phone
    if update.address:
        changes["address"] = update.address.model_dump(by_alias=True, exclude_none=True)
    if update.preferences:
        changes["preferences"] = {
            **user.preferences,
            **update.preferences.model_dump(by_alias=True, exclude_none=True),
        }

    if not changes:
        return user
    logger.info(f"Updating profile of user {user.id}: {sorted(changes)}")
    return users.update(user.id, **changes)


# --- Endpoints ---

@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse, "description": "Email already registered"}},
)
def register(
    body: RegisterRequest,
    users: UserRepository = Depends(get_user_repository),
    resolver: PrincipalResolver = Depends(get_principal_resolver),
    settings: Settings = Depends(get_app_settings),
):
    """Register a new customer and return a token."""
    email = body.email.lower()

    if users.get_by_email(email):
        raise ConflictError("User already exists with this email")

    now = datetime.now(timezone.utc)
    user = users.insert(User(
        id=str(time.time_ns()),
        name=body.name,
        email=email,
        password_hash=get_password_hash(body.password, rounds=settings.password_hash_rounds),
        role=Role.CUSTOMER,
        phone=body.phone,
        address=body.address.model_dump(by_alias=True, exclude_none=True) if body.address else {},
        created_at=now,
        last_login=now,
    ))
    logger.info(f"Registered user {user.id}")

    return AuthResponse(
        message="User registered successfully",
        token=resolver.issue_token(user),
        user=shape_user(user, Audience.SUMMARY),
    )


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={400: {"model": ErrorResponse, "description": "Invalid credentials"}},
)
def login(
    body: LoginRequest,
    resolver: PrincipalResolver = Depends(get_principal_resolver),
):
    """Login endpoint. Returns a token if the credentials are valid."""
    user = resolver.authenticate(body.email, body.password)
    logger.info(f"User {user.id} logged in")

    return AuthResponse(
        message="Login successful",
        token=resolver.issue_token(user),
        user=shape_user(user, Audience.SUMMARY),
    )


@router.post(
    "/vendor-login",
    response_model=AuthResponse,
    responses={400: {"model": ErrorResponse, "description": "Invalid vendor credentials"}},
)
def vendor_login(
    body: LoginRequest,
    resolver: PrincipalResolver = Depends(get_principal_resolver),
):
    """Login restricted to vendor accounts."""
    user = resolver.authenticate(body.email, body.password, role=Role.VENDOR)
    logger.info(f"Vendor {user.id} logged in")

    return AuthResponse(
        message="Vendor login successful",
        token=resolver.issue_token(user),
        user=shape_user(user, Audience.SUMMARY),
    )


@router.get("/me", response_model=UserEnvelope)
def read_users_me(current_user: User = Depends(get_current_user)):
    """Get current user profile."""
    return UserEnvelope(user=shape_user(current_user, Audience.SELF))


@router.put("/profile", response_model=ProfileUpdateResponse)
def update_profile(
    body: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
):
    """Update name, phone, address or preferences."""
    user = apply_profile_update(current_user, body, users)
    return ProfileUpdateResponse(
        message="Profile updated successfully",
        user=shape_user(user, Audience.SELF),
    )


@router.post(
    "/change-password",
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponse, "description": "Current password is incorrect"}},
)
def change_password(
    body: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
    settings: Settings = Depends(get_app_settings),
):
    """Change the password after checking the current one."""
    if not verify_password(body.current_password, current_user.password_hash):
        raise InvalidCredentials("Current password is incorrect")

    users.update(
        current_user.id,
        password_hash=get_password_hash(body.new_password, rounds=settings.password_hash_rounds),
    )
    logger.info(f"Password changed for user {current_user.id}")
    return MessageResponse(message="Password changed successfully")


@router.post("/verify-password", response_model=VerifyPasswordResponse)
def verify_current_password(
    body: VerifyPasswordRequest,
    current_user: User = Depends(get_current_user),
):
    """Check whether a password matches the current user's."""
    return VerifyPasswordResponse(
        is_valid=verify_password(body.password, current_user.password_hash)
    )
