"""
Database Schemas

MongoDB collection schemas and the request/response models built on them.
Collection names are the lowercase class name:
- User -> "user" collection
- Profile -> "profile" collection
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class User(BaseModel):
    """Users collection schema (collection name: user)"""
    name: str = Field(..., description="Display name")
    email: EmailStr = Field(..., description="User email (unique)")
    avatar: str = Field(..., description="Gravatar URL derived from the email")
    password_hash: str = Field(..., description="BCrypt hashed password")


class Social(BaseModel):
    youtube: Optional[str] = None
    twitter: Optional[str] = None
    facebook: Optional[str] = None
    linkedin: Optional[str] = None
    instagram: Optional[str] = None


SOCIAL_FIELDS = tuple(Social.model_fields)


class Experience(BaseModel):
    """Experience entry embedded in a profile, newest first."""
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1)
    company: str = Field(..., min_length=1)
    location: Optional[str] = None
    from_: datetime = Field(..., alias="from")
    to: Optional[datetime] = None
    current: bool = False
    description: Optional[str] = None


# Request payloads

class RegisterPayload(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=6)


class LoginPayload(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class ProfilePayload(BaseModel):
    """Profile fields for create/update; fields left out of the request are not touched."""
    company: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    status: Optional[str] = Field(None, min_length=1)
    githubusername: Optional[str] = None
    skills: Optional[str] = Field(None, min_length=1, description="Comma separated list of skills")
    youtube: Optional[str] = None
    twitter: Optional[str] = None
    facebook: Optional[str] = None
    linkedin: Optional[str] = None
    instagram: Optional[str] = None


# Responses

class TokenResponse(BaseModel):
    token: str


class MessageResponse(BaseModel):
    msg: str


class UserResponse(BaseModel):
    id: str = Field(..., alias="_id")
    name: str
    email: EmailStr
    avatar: Optional[str] = None
    date: Optional[datetime] = None


class OwnerResponse(BaseModel):
    id: str = Field(..., alias="_id")
    name: Optional[str] = None
    avatar: Optional[str] = None


class ExperienceResponse(Experience):
    id: str = Field(..., alias="_id")


class ProfileResponse(BaseModel):
    id: str = Field(..., alias="_id")
    user: Optional[OwnerResponse] = None
    company: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    status: Optional[str] = None
    githubusername: Optional[str] = None
    skills: List[str] = []
    social: Social = Field(default_factory=Social)
    experience: List[ExperienceResponse] = []
    date: Optional[datetime] = None
