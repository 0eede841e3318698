from pydantic import BaseModel, EmailStr, Field
from tripsplit.schemas.user import UserResponse


class UserSignup(BaseModel):
    """Schema for user signup"""
    name: str = Field(..., min_length=2, max_length=100)
    username: str = Field(..., min_length=2, max_length=50, pattern=r"^[A-Za-z0-9_.-]+$")
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)


class UserLogin(BaseModel):
    """Schema for user login"""
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    """Schema for authentication token response"""
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
