"""
Profile Endpoints.

Endpoints Provided:
- `GET /api/profile/me`: The caller's profile.
- `PUT /api/profile`: Create or update the caller's profile.
- `DELETE /api/profile`: Delete the caller's profile (user and posts remain).
- `GET /api/profile`: Every profile, with owner name and avatar.
- `GET /api/profile/user/{user_id}`: One user's public profile.
- `PUT /api/profile/experience`, `DELETE /api/profile/experience/{exp_id}`.
- `PUT /api/profile/education`, `DELETE /api/profile/education/{edu_id}`.

All write endpoints and `/me` sit behind the authorization gate.
"""

from typing import List

from fastapi import APIRouter, Depends

from api.dependencies import get_current_user_id, get_profile_service
from api.schemas import (
    EducationRequest,
    ExperienceRequest,
    MessageResponse,
    ProfileRequest,
    ProfileResponse,
)
from core.logging_config import get_logger, log_function_call
from services.profile_service import ProfileService

logger = get_logger(__name__)
router = APIRouter(prefix="/api/profile", tags=["Profiles"])


@router.get("/me", response_model=ProfileResponse)
@log_function_call(logger)
async def get_my_profile(
    user_id: str = Depends(get_current_user_id),
    profiles: ProfileService = Depends(get_profile_service),
):
    """Get the current user's profile"""
    return ProfileResponse.from_view(await profiles.get_own_profile(user_id))


@router.put("", response_model=ProfileResponse)
@log_function_call(logger)
async def upsert_profile(
    request: ProfileRequest,
    user_id: str = Depends(get_current_user_id),
    profiles: ProfileService = Depends(get_profile_service),
):
    """Create or update the current user's profile"""
    view = await profiles.upsert_profile(user_id, request.model_dump())
    return ProfileResponse.from_view(view)


@router.delete("", response_model=MessageResponse)
@log_function_call(logger)
async def delete_profile(
    user_id: str = Depends(get_current_user_id),
    profiles: ProfileService = Depends(get_profile_service),
):
    """Delete the current user's profile"""
    await profiles.delete_profile(user_id)
    return MessageResponse(message="Profile deleted")


@router.get("", response_model=List[ProfileResponse])
@log_function_call(logger)
async def list_profiles(profiles: ProfileService = Depends(get_profile_service)):
    """List all profiles"""
    return [ProfileResponse.from_view(view) for view in await profiles.list_profiles()]


@router.get("/user/{user_id}", response_model=ProfileResponse)
@log_function_call(logger)
async def get_profile_by_user(
    user_id: str, profiles: ProfileService = Depends(get_profile_service)
):
    """Get a profile by its owner's id"""
    return ProfileResponse.from_view(await profiles.get_profile_by_user(user_id))


@router.put("/experience", response_model=ProfileResponse)
@log_function_call(logger)
async def add_experience(
    request: ExperienceRequest,
    user_id: str = Depends(get_current_user_id),
    profiles: ProfileService = Depends(get_profile_service),
):
    """Add an experience entry to the current user's profile"""
    view = await profiles.add_experience(user_id, request.model_dump(by_alias=True))
    return ProfileResponse.from_view(view)


@router.delete("/experience/{exp_id}", response_model=ProfileResponse)
@log_function_call(logger)
async def remove_experience(
    exp_id: str,
    user_id: str = Depends(get_current_user_id),
    profiles: ProfileService = Depends(get_profile_service),
):
    """Remove an experience entry from the current user's profile"""
    return ProfileResponse.from_view(await profiles.remove_experience(user_id, exp_id))


@router.put("/education", response_model=ProfileResponse)
@log_function_call(logger)
async def add_education(
    request: EducationRequest,
    user_id: str = Depends(get_current_user_id),
    profiles: ProfileService = Depends(get_profile_service),
):
    """Add an education entry to the current user's profile"""
    view = await profiles.add_education(user_id, request.model_dump(by_alias=True))
    return ProfileResponse.from_view(view)


@router.delete("/education/{edu_id}", response_model=ProfileResponse)
@log_function_call(logger)
async def remove_education(
    edu_id: str,
    user_id: str = Depends(get_current_user_id),
    profiles: ProfileService = Depends(get_profile_service),
):
    """Remove an education entry from the current user's profile"""
    return ProfileResponse.from_view(await profiles.remove_education(user_id, edu_id))
