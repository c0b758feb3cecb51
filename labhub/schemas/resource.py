"""Resource catalog Pydantic schemas."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ResourceKind(str, Enum):
    LAB = "lab"
    EQUIPMENT = "equipment"
    CLASSROOM = "classroom"


class ResourceStatus(str, Enum):
    AVAILABLE = "available"
    BOOKED = "booked"
    MAINTENANCE = "maintenance"


class ResourceCreate(BaseModel):
    """Schema for adding a resource to the catalog."""

    name: str = Field(..., min_length=1, max_length=200)
    kind: ResourceKind = ResourceKind.LAB
    description: str | None = Field(None, max_length=2000)
    location: str | None = Field(None, max_length=200)
    department: str | None = Field(None, max_length=200)
    features: list[str] = Field(default_factory=list)
    open_hours: str | None = Field(None, max_length=100)
    capacity: int = Field(default=1, ge=1)
    status: ResourceStatus = ResourceStatus.AVAILABLE
    requires_approval: bool = True


class ResourceStatusUpdate(BaseModel):
    status: ResourceStatus


class ResourceResponse(BaseModel):
    """Schema for resource response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    kind: ResourceKind
    description: str | None
    location: str | None
    department: str | None
    features: list[str]
    open_hours: str | None
    capacity: int
    status: ResourceStatus
    requires_approval: bool
    created_at: datetime | None = None
