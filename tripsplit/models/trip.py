"""
Trip model - a shared cost-tracking context.

Participants are embedded in the trip document, so they can never be shared
between trips. Each participant is exactly one of two forms, told apart by
``kind``:

- ``RegisteredParticipant``: linked to a user account; shown by username
- ``PlaceholderParticipant``: just a display name, no linked identity

The owner is always a registered participant (inserted at trip creation).
"""

from typing import Annotated, List, Literal, Optional, Set, Union
from datetime import datetime, timezone
from pydantic import BaseModel, Field

from tripsplit.models.base import MongoModel, PyObjectId


class RegisteredParticipant(BaseModel):
    kind: Literal["user"] = "user"
    participant_id: PyObjectId = Field(default_factory=PyObjectId)
    user_id: PyObjectId
    username: str
    joined_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def display_name(self) -> str:
        return self.username


class PlaceholderParticipant(BaseModel):
    kind: Literal["placeholder"] = "placeholder"
    participant_id: PyObjectId = Field(default_factory=PyObjectId)
    name: str = Field(..., min_length=1, max_length=100)
    joined_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def display_name(self) -> str:
        return self.name


Participant = Annotated[
    Union[RegisteredParticipant, PlaceholderParticipant],
    Field(discriminator="kind")
]


class Trip(MongoModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    owner_id: PyObjectId
    participants: List[Participant] = []

    def participant_ids(self) -> Set[str]:
        """Current membership, as passed to the share validator."""
        return {str(p.participant_id) for p in self.participants}

    def participant_for_user(self, user_id) -> Optional[RegisteredParticipant]:
        """Resolve an underlying identity to this trip's participant record."""
        uid = str(user_id)
        for p in self.participants:
            if isinstance(p, RegisteredParticipant) and str(p.user_id) == uid:
                return p
        return None

    def is_owner(self, user_id) -> bool:
        return str(self.owner_id) == str(user_id)

    def is_member(self, user_id) -> bool:
        """Owner or registered participant."""
        return self.is_owner(user_id) or self.participant_for_user(user_id) is not None
