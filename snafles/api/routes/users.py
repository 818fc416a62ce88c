"""
User API Routes

Self-service profile endpoints.
"""

from fastapi import APIRouter, Depends

from snafles.api.dependencies import get_current_user, get_user_repository
from snafles.api.routes.auth import apply_profile_update
from snafles.api.schemas import ProfileUpdate, ProfileUpdateResponse, UserEnvelope
from snafles.api.shaping import Audience, shape_user
from snafles.storage.models import User
from snafles.storage.repository import UserRepository


router = APIRouter(prefix="/users", tags=["users"])


@router.get("/profile", response_model=UserEnvelope)
def get_profile(current_user: User = Depends(get_current_user)):
    return UserEnvelope(user=shape_user(current_user, Audience.SELF))


@router.put("/profile", response_model=ProfileUpdateResponse)
def update_profile(
    body: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
):
    user = apply_profile_update(current_user, body, users)
    return ProfileUpdateResponse(
        message="Profile updated successfully",
        user=shape_user(user, Audience.SELF),
    )
