"""
Core data models for the DevConnector API.

Defines the three persisted tables (`User`, `Profile`, `Post`) and the
embedded records stored inside them. Experience, education, likes and comments
live in JSON columns on their parent row, so a profile or a post is read and
written as a single document. Embedded records are always replaced as a whole
list, never mutated in place, so SQLAlchemy sees the change.
"""

import uuid
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field as PydanticField
from sqlalchemy import JSON, Column, DateTime
from sqlalchemy.types import TypeDecorator
from sqlmodel import Field, SQLModel


def new_id() -> str:
    return uuid.uuid4().hex


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware UTC timestamp column. Naive values are taken to be UTC on
    the way in; SQLite drops the offset on storage, so it is reattached on the
    way out.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        return self.process_bind_param(value, dialect)


class User(SQLModel, table=True):
    """
    Registered account. The password column holds a bcrypt hash and is never
    part of any response model.
    """

    __tablename__ = "users"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    name: str = Field(max_length=255)
    email: str = Field(max_length=254, unique=True, index=True)
    password: str = Field(max_length=255)
    avatar: Optional[str] = Field(default=None, max_length=1024)
    date: datetime = Field(
        default_factory=utc_now, sa_column=Column(UTCDateTime, nullable=False)
    )


class Profile(SQLModel, table=True):
    """
    Extended public information for a user; at most one per user.
    """

    __tablename__ = "profiles"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    user_id: str = Field(foreign_key="users.id", unique=True, index=True)
    company: Optional[str] = Field(default=None, max_length=255)
    website: Optional[str] = Field(default=None, max_length=1024)
    location: Optional[str] = Field(default=None, max_length=255)
    status: str = Field(max_length=255)
    bio: Optional[str] = Field(default=None)
    githubusername: Optional[str] = Field(default=None, max_length=255)
    skills: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    social: Dict[str, str] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    experience: List[Dict[str, Any]] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    education: List[Dict[str, Any]] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    date: datetime = Field(
        default_factory=utc_now, sa_column=Column(UTCDateTime, nullable=False)
    )


class Post(SQLModel, table=True):
    """
    Feed entry. `name` and `avatar` are a snapshot of the author taken when the
    post is created and are not refreshed afterwards.
    """

    __tablename__ = "posts"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    user_id: str = Field(foreign_key="users.id", index=True)
    text: str
    name: Optional[str] = Field(default=None, max_length=255)
    avatar: Optional[str] = Field(default=None, max_length=1024)
    likes: List[Dict[str, Any]] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    comments: List[Dict[str, Any]] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    date: datetime = Field(
        default_factory=utc_now, sa_column=Column(UTCDateTime, nullable=False, index=True)
    )


# Embedded records


class Experience(BaseModel):
    """Job entry on a profile"""

    model_config = ConfigDict(populate_by_name=True)

    id: str = PydanticField(default_factory=new_id)
    title: str
    company: str
    location: Optional[str] = None
    from_date: date = PydanticField(alias="from")
    to_date: Optional[date] = PydanticField(default=None, alias="to")
    current: bool = False
    description: Optional[str] = None


class Education(BaseModel):
    """School entry on a profile"""

    model_config = ConfigDict(populate_by_name=True)

    id: str = PydanticField(default_factory=new_id)
    school: str
    degree: str
    fieldofstudy: str
    from_date: date = PydanticField(alias="from")
    to_date: Optional[date] = PydanticField(default=None, alias="to")
    current: bool = False
    description: Optional[str] = None


class Like(BaseModel):
    id: str = PydanticField(default_factory=new_id)
    user: str


class Comment(BaseModel):
    """Comment on a post, with a snapshot of the commenter"""

    id: str = PydanticField(default_factory=new_id)
    user: str
    text: str
    name: Optional[str] = None
    avatar: Optional[str] = None
    date: datetime = PydanticField(default_factory=utc_now)


def to_document(record: BaseModel) -> Dict[str, Any]:
    """Serialize an embedded record for storage in a JSON column"""
    return record.model_dump(mode="json", by_alias=True)
