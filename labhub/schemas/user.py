"""Identity schemas."""

from pydantic import BaseModel, Field


class Requester(BaseModel):
    """Identity resolved by the auth provider and passed into every call."""

    id: str = Field(..., min_length=1)
    name: str
    role: str = "student"
    avatar: str | None = None
