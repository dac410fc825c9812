"""
Profile Management Service.

This module defines the `ProfileService`, which manages the one-per-user
`Profile` document and its embedded experience and education lists.

Key Components:
- Profile lifecycle: `get_own_profile`, `upsert_profile`, `delete_profile`.
- Public reads: `list_profiles` and `get_profile_by_user`, each joined with the
  owning user's name and avatar for display.
- Embedded lists: `add_experience` / `add_education` prepend a new entry
  (most recent first); `remove_experience` / `remove_education` remove by entry
  id and leave the list untouched when the id is unknown.

Profiles are returned as `ProfileView` pairs of (profile, owner) so the API
layer can render the owner's name and avatar without another query.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from core.exceptions import NotFoundError, ValidationError
from core.models import Education, Experience, Profile, User, to_document
from core.validation import FieldErrors, InputValidator

logger = logging.getLogger(__name__)

SCALAR_FIELDS = ("company", "website", "location", "bio", "status", "githubusername")
SOCIAL_FIELDS = ("youtube", "twitter", "facebook", "linkedin", "instagram")

EXPERIENCE_REQUIRED = {
    "title": "Title is required",
    "company": "Company is required",
    "from": "From date is required",
}
EDUCATION_REQUIRED = {
    "school": "School is required",
    "degree": "Degree is required",
    "fieldofstudy": "Field of study is required",
    "from": "From date is required",
}


@dataclass
class ProfileView:
    """A profile together with its owner"""

    profile: Profile
    user: Optional[User]


class ProfileService:
    """Service that manages user profiles"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_own_profile(self, user_id: str) -> ProfileView:
        """Get the caller's profile"""
        profile = await self._find_profile(user_id)
        if profile is None:
            raise NotFoundError("Profile", "There is no profile for this user")
        return await self._view(profile)

    async def get_profile_by_user(self, user_id: str) -> ProfileView:
        """Get any user's public profile"""
        profile = await self._find_profile(user_id)
        if profile is None:
            raise NotFoundError("Profile", "Profile not found")
        return await self._view(profile)

    async def list_profiles(self) -> List[ProfileView]:
        """All profiles joined with their owners"""
        result = await self.session.exec(
            select(Profile, User)
            .join(User, Profile.user_id == User.id)
            .order_by(Profile.date)
        )
        return [ProfileView(profile=profile, user=user) for profile, user in result.all()]

    async def upsert_profile(self, user_id: str, fields: Dict[str, Any]) -> ProfileView:
        """Create the caller's profile, or update the provided fields in place"""
        errors = FieldErrors()
        errors.check(
            InputValidator.validate_required, "status", fields.get("status"), "Status is required"
        )
        errors.check(
            InputValidator.validate_required,
            "skills",
            _skills_text(fields.get("skills")),
            "Skills is required",
        )
        errors.raise_if_any()

        values: Dict[str, Any] = {}
        for name in SCALAR_FIELDS:
            if fields.get(name) is not None:
                values[name] = InputValidator.sanitize_string(fields[name])
        values["skills"] = InputValidator.parse_skills(fields["skills"])

        social = {
            name: InputValidator.sanitize_string(fields[name])
            for name in SOCIAL_FIELDS
            if fields.get(name)
        }

        profile = await self._find_profile(user_id)
        if profile is None:
            profile = Profile(user_id=user_id, social=social, **values)
            self.session.add(profile)
            try:
                await self.session.commit()
            except IntegrityError:
                # A concurrent request created the profile first; update that one
                await self.session.rollback()
                profile = await self._find_profile(user_id)
                if profile is None:
                    raise
            else:
                logger.info(f"Created profile for user {user_id}")
                return await self._view(profile)

        for name, value in values.items():
            setattr(profile, name, value)
        profile.social = social
        self.session.add(profile)
        await self.session.commit()
        logger.info(f"Updated profile for user {user_id}")
        return await self._view(profile)

    async def delete_profile(self, user_id: str) -> None:
        """Remove the caller's profile; the user and their posts remain"""
        profile = await self._find_profile(user_id)
        if profile is None:
            raise NotFoundError("Profile", "There is no profile for this user")
        await self.session.delete(profile)
        await self.session.commit()
        logger.info(f"Deleted profile for user {user_id}")

    async def add_experience(self, user_id: str, entry: Dict[str, Any]) -> ProfileView:
        experience = _build_entry(Experience, entry, EXPERIENCE_REQUIRED)
        profile = await self._require_profile(user_id)
        profile.experience = [to_document(experience)] + list(profile.experience)
        return await self._save(profile)

    async def add_education(self, user_id: str, entry: Dict[str, Any]) -> ProfileView:
        education = _build_entry(Education, entry, EDUCATION_REQUIRED)
        profile = await self._require_profile(user_id)
        profile.education = [to_document(education)] + list(profile.education)
        return await self._save(profile)

    async def remove_experience(self, user_id: str, entry_id: str) -> ProfileView:
        """Remove an experience entry by id (no-op when the id is unknown)"""
        profile = await self._require_profile(user_id)
        remaining = [item for item in profile.experience if item.get("id") != entry_id]
        if len(remaining) == len(profile.experience):
            logger.debug(f"Experience {entry_id} not on profile of user {user_id}")
            return await self._view(profile)
        profile.experience = remaining
        return await self._save(profile)

    async def remove_education(self, user_id: str, entry_id: str) -> ProfileView:
        """Remove an education entry by id (no-op when the id is unknown)"""
        profile = await self._require_profile(user_id)
        remaining = [item for item in profile.education if item.get("id") != entry_id]
        if len(remaining) == len(profile.education):
            logger.debug(f"Education {entry_id} not on profile of user {user_id}")
            return await self._view(profile)
        profile.education = remaining
        return await self._save(profile)

    async def _find_profile(self, user_id: str) -> Optional[Profile]:
        result = await self.session.exec(select(Profile).where(Profile.user_id == user_id))
        return result.first()

    async def _require_profile(self, user_id: str) -> Profile:
        profile = await self._find_profile(user_id)
        if profile is None:
            raise NotFoundError("Profile", "There is no profile for this user")
        return profile

    async def _save(self, profile: Profile) -> ProfileView:
        self.session.add(profile)
        await self.session.commit()
        return await self._view(profile)

    async def _view(self, profile: Profile) -> ProfileView:
        user = await self.session.get(User, profile.user_id)
        return ProfileView(profile=profile, user=user)


def _skills_text(skills: Any) -> str:
    if skills is None or not isinstance(skills, (str, list, tuple)):
        return skills
    return ",".join(InputValidator.parse_skills(skills))


def _build_entry(model, entry: Dict[str, Any], required: Dict[str, str]):
    """Validate required fields, then build the embedded record"""
    errors = FieldErrors()
    for name, message in required.items():
        value = entry.get(name)
        errors.check(
            InputValidator.validate_required,
            name,
            value if value is None or isinstance(value, str) else str(value),
            message,
        )
    errors.raise_if_any()

    data = {key: value for key, value in entry.items() if value not in (None, "")}
    data.pop("id", None)
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "input"
        raise ValidationError(field, entry.get(field), first["msg"])
