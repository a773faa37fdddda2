"""Pydantic schemas for request and response bodies."""
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from models import UserRole


class UserCreate(BaseModel):
    """Schema for user registration"""
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=1)
    photo: Optional[str] = None


class UserUpdate(BaseModel):
    """Schema for updating User data; omitted fields are left unchanged"""
    id: int
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    password: Optional[str] = Field(default=None, min_length=1)
    photo: Optional[str] = None
    role: Optional[UserRole] = None


class UserRead(BaseModel):
    id: int
    name: str
    email: str
    photo: Optional[str] = None
    role: UserRole

    model_config = ConfigDict(from_attributes=True)


class LoginRequest(BaseModel):
    email: str
    password: str


class LoginResponse(BaseModel):
    user: UserRead
    token: str


class TopicCreate(BaseModel):
    description: str = Field(min_length=1, max_length=255)


class TopicUpdate(BaseModel):
    """Schema for updating Topic data"""
    id: int
    description: Optional[str] = Field(default=None, min_length=1, max_length=255)


class TopicRead(BaseModel):
    id: int
    description: str

    model_config = ConfigDict(from_attributes=True)


class PostCreate(BaseModel):
    """Schema for creating a Post; creator and topic must already exist"""
    title: str = Field(min_length=1, max_length=100)
    description: str
    photo: Optional[str] = None
    creator_id: int
    topic_id: int


class PostUpdate(BaseModel):
    """Schema for updating Post data; the creator cannot be changed"""
    id: int
    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    photo: Optional[str] = None
    topic_id: Optional[int] = None


class PostRead(BaseModel):
    id: int
    title: str
    description: str
    photo: Optional[str] = None
    creator: UserRead
    topic: TopicRead

    model_config = ConfigDict(from_attributes=True)
