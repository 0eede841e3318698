from datetime import datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from tripsplit.models.trip import Participant, RegisteredParticipant, Trip


class TripCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None


class TripUpdate(BaseModel):
    """Partial update; only the fields sent are changed."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_null(cls, value):
        # description may be cleared, name may not
        if value is None:
            raise ValueError("name cannot be null")
        return value


class ParticipantAdd(BaseModel):
    """
    Add a participant by exactly one of:
    - email or username of a registered user
    - arbitrary_name for a placeholder without an account
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    email: Optional[EmailStr] = None
    username: Optional[str] = None
    arbitrary_name: Optional[str] = Field(None, min_length=1, max_length=100)

    @model_validator(mode="after")
    def exactly_one_identity(self):
        given = [v for v in (self.email, self.username, self.arbitrary_name) if v]
        if len(given) != 1:
            raise ValueError("Provide exactly one of email, username or arbitrary_name")
        return self


class ParticipantResponse(BaseModel):
    participant_id: str
    kind: Literal["user", "placeholder"]
    display_name: str
    user_id: Optional[str] = None
    joined_at: datetime

    @classmethod
    def from_model(cls, participant: Participant) -> "ParticipantResponse":
        user_id = None
        if isinstance(participant, RegisteredParticipant):
            user_id = str(participant.user_id)
        return cls(
            participant_id=str(participant.participant_id),
            kind=participant.kind,
            display_name=participant.display_name,
            user_id=user_id,
            joined_at=participant.joined_at
        )


class TripResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    owner_id: str
    participants: List[ParticipantResponse] = []
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, trip: Trip) -> "TripResponse":
        return cls(
            id=str(trip.id),
            name=trip.name,
            description=trip.description,
            owner_id=str(trip.owner_id),
            participants=[ParticipantResponse.from_model(p) for p in trip.participants],
            created_at=trip.created_at,
            updated_at=trip.updated_at
        )
