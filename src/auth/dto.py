
from pydantic import BaseModel, EmailStr, Field, UUID4

from ..core.dto import UTCDatetime


class RegisterPayload(BaseModel):
    email: EmailStr
    name: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=6, max_length=128)


class LoginPayload(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserResponse(BaseModel):
    id: UUID4
    email: EmailStr
    name: str
    created_at: UTCDatetime


class UserResponseFlat(BaseModel):
    id: UUID4
    email: EmailStr
    name: str


class AuthResponse(BaseModel):
    user: UserResponse
    token: str


class JWTResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
