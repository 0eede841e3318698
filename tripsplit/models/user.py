from pydantic import EmailStr, Field
from tripsplit.models.base import MongoModel


class User(MongoModel):
    """Registered account. Participants of a trip may link to one."""
    name: str = Field(..., min_length=1, max_length=100)
    username: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    hashed_password: str
    is_deleted: bool = False
