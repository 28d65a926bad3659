"""Auth and profile DTOs for API layer"""

from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime
from uuid import UUID


class RegisterProfileDto(BaseModel):
    """DTO for member registration"""
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    display_name: Optional[str] = Field(None, max_length=100)


class LoginDto(BaseModel):
    """DTO for login"""
    email: EmailStr
    password: str


class RefreshTokenDto(BaseModel):
    """DTO for refresh token request"""
    refresh_token: str


class UpdateProfileDto(BaseModel):
    display_name: Optional[str] = Field(None, max_length=100)
    avatar_url: Optional[str] = Field(None, max_length=500)


class SetRoleDto(BaseModel):
    role: str


class ProfileDto(BaseModel):
    """DTO for profile response"""
    id: UUID
    email: str
    role: str
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: datetime
    last_login: Optional[datetime] = None

    @classmethod
    def from_entity(cls, profile) -> "ProfileDto":
        return cls(
            id=profile.id.value,
            email=profile.email,
            role=profile.role.value,
            display_name=profile.display_name,
            avatar_url=profile.avatar_url,
            created_at=profile.created_at,
            last_login=profile.last_login,
        )


class TokenDto(BaseModel):
    """DTO for authentication tokens"""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class AuthResponse(BaseModel):
    """Profile with its tokens"""
    profile: ProfileDto
    tokens: TokenDto
