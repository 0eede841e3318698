from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr

from tripsplit.models.user import User


class UserResponse(BaseModel):
    """Public view of a user account."""
    id: str
    name: str
    username: str
    email: EmailStr
    created_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, user: User) -> "UserResponse":
        return cls(
            id=str(user.id),
            name=user.name,
            username=user.username,
            email=user.email,
            created_at=user.created_at
        )
