"""
Request and response models for the API surface.

Request models accept loosely typed input (missing fields default to `None`)
because required-field checks happen in the services, where they produce the
field-level `errors` list clients expect. Response models never include a
password hash.
"""

from datetime import date, datetime
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from core.models import Comment, Education, Experience, Like, Post, User
from services.profile_service import ProfileView


class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class TokenResponse(BaseModel):
    token: str


class MessageResponse(BaseModel):
    message: str


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    avatar: Optional[str]
    date: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            avatar=user.avatar,
            date=user.date,
        )


class ProfileRequest(BaseModel):
    company: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    status: Optional[str] = None
    skills: Optional[Union[str, List[str]]] = None
    bio: Optional[str] = None
    githubusername: Optional[str] = None
    youtube: Optional[str] = None
    twitter: Optional[str] = None
    facebook: Optional[str] = None
    linkedin: Optional[str] = None
    instagram: Optional[str] = None


class ExperienceRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    from_date: Optional[date] = Field(default=None, alias="from")
    to_date: Optional[date] = Field(default=None, alias="to")
    current: bool = False
    description: Optional[str] = None


class EducationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    school: Optional[str] = None
    degree: Optional[str] = None
    fieldofstudy: Optional[str] = None
    from_date: Optional[date] = Field(default=None, alias="from")
    to_date: Optional[date] = Field(default=None, alias="to")
    current: bool = False
    description: Optional[str] = None


class ProfileOwner(BaseModel):
    id: str
    name: Optional[str] = None
    avatar: Optional[str] = None


class ProfileResponse(BaseModel):
    id: str
    user: ProfileOwner
    company: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    status: str
    skills: List[str]
    bio: Optional[str] = None
    githubusername: Optional[str] = None
    social: Dict[str, str]
    experience: List[Experience]
    education: List[Education]
    date: datetime

    @classmethod
    def from_view(cls, view: ProfileView) -> "ProfileResponse":
        profile, user = view.profile, view.user
        owner = ProfileOwner(
            id=profile.user_id,
            name=user.name if user else None,
            avatar=user.avatar if user else None,
        )
        return cls(
            id=profile.id,
            user=owner,
            company=profile.company,
            website=profile.website,
            location=profile.location,
            status=profile.status,
            skills=profile.skills,
            bio=profile.bio,
            githubusername=profile.githubusername,
            social=profile.social,
            experience=[Experience.model_validate(item) for item in profile.experience],
            education=[Education.model_validate(item) for item in profile.education],
            date=profile.date,
        )


class TextRequest(BaseModel):
    text: Optional[str] = None


class PostResponse(BaseModel):
    id: str
    user: str
    text: str
    name: Optional[str] = None
    avatar: Optional[str] = None
    likes: List[Like]
    comments: List[Comment]
    date: datetime

    @classmethod
    def from_post(cls, post: Post) -> "PostResponse":
        return cls(
            id=post.id,
            user=post.user_id,
            text=post.text,
            name=post.name,
            avatar=post.avatar,
            likes=[Like.model_validate(item) for item in post.likes],
            comments=[Comment.model_validate(item) for item in post.comments],
            date=post.date,
        )
