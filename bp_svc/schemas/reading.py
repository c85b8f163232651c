"""
Pydantic schemas for blood pressure readings and profiles.

Readings arrive from the REST backend with Mongo-style keys (`_id`,
`bodyPosition`); both those keys and the Python field names are accepted.
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bp_svc.core.datetime_utils import parse_datetime


class BodyPosition(str, Enum):
    """Body position while the reading was taken."""

    SEATED = "seated"
    LEANING = "leaning"
    LAYING = "laying"

    @property
    def label(self) -> str:
        """Display label, e.g. 'Seated'."""
        return self.value.capitalize()


class Reading(BaseModel):
    """A single blood pressure measurement.

    Immutable once created; an edit replaces the whole record.
    """
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "_id": "65a1f0c2e4b0a1b2c3d4e5f6",
                "systolic": 128,
                "diastolic": 82,
                "pulse": 72,
                "bodyPosition": "seated",
                "note": "After morning walk",
                "timestamp": "2025-01-01T08:30:00Z",
            }
        },
    )

    id: str = Field(..., alias="_id", min_length=1, description="Opaque unique identifier")
    systolic: int = Field(..., gt=0, description="Systolic pressure in mmHg")
    diastolic: int = Field(..., gt=0, description="Diastolic pressure in mmHg")
    pulse: Optional[int] = Field(None, gt=0, description="Pulse in bpm")
    body_position: BodyPosition = Field(..., alias="bodyPosition", description="Body position during the reading")
    note: Optional[str] = Field(None, description="Free-text note")
    timestamp: datetime = Field(..., description="ISO 8601 instant of the measurement")
    profile: Optional[str] = Field(None, description="Owning profile id")

    @field_validator("timestamp", mode="before")
    @classmethod
    def normalize_timestamp(cls, value):
        """Normalize timestamps to timezone-aware UTC; naive values are taken as UTC."""
        return parse_datetime(value)


class Profile(BaseModel):
    """Profile metadata, used for report headers."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., alias="_id", min_length=1)
    name: str = Field(..., min_length=1, max_length=200)
    relation: str = Field(..., description="Relation to the account owner, e.g. 'self'")
    dob: Optional[str] = Field(None, description="Date of birth (YYYY-MM-DD)")
    sex: Optional[str] = Field(None, pattern="^(female|male|other)$")
    is_default: bool = Field(False, alias="isDefault")
