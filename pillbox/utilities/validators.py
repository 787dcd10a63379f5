"""
Input validation schemas using Pydantic for request bodies.

Business rules that must surface as user-visible validation errors (blank
name, empty schedule, negative quantities) are enforced by the logic layer,
not here, so they produce the same error whether the call comes from the
API or from Python code.
"""
from datetime import date
from typing import List, Optional, Union

from pydantic import BaseModel, Field, field_validator

from pillbox.utilities.constants import TimeSlot, TIME_SLOTS, DEFAULT_PER_DOSE, DEFAULT_THRESHOLD


def normalize_slots(values) -> List[TimeSlot]:
    """Parse, deduplicate and order a collection of time slots."""
    if values is None:
        return []
    if isinstance(values, (str, TimeSlot)):
        values = [values]
    parsed = {TimeSlot.parse(v) for v in values}
    return [slot for slot in TIME_SLOTS if slot in parsed]


class MedicationUpdateInput(BaseModel):
    """Schema for a full replace of a medication definition."""
    name: str = Field("", max_length=200)
    dosage: Optional[str] = Field(None, max_length=200)
    per_dose: int = Field(DEFAULT_PER_DOSE, ge=1, le=100)
    times: List[TimeSlot] = Field(default_factory=list)

    @field_validator('name')
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator('dosage')
    @classmethod
    def blank_dosage_is_none(cls, v):
        """An empty dosage text is stored as null."""
        if v is None:
            return None
        v = v.strip()
        return v or None

    @field_validator('times', mode='before')
    @classmethod
    def parse_times(cls, v):
        return normalize_slots(v)


class MedicationInput(MedicationUpdateInput):
    """Schema for creating a medication with its initial stock."""
    threshold: int = Field(DEFAULT_THRESHOLD, ge=0)
    initial_on_hand: int = Field(0, ge=0)
    initial_reserve: int = Field(0, ge=0)


class QuantityInput(BaseModel):
    """Raw quantity as typed by the user; coerced by the inventory ledger."""
    qty: Union[int, float, str, None] = None


class IntakeInput(BaseModel):
    day: date
    slot: TimeSlot
    med_id: str = Field(..., min_length=1)
    taken: bool

    @field_validator('slot', mode='before')
    @classmethod
    def parse_slot(cls, v):
        return TimeSlot.parse(v)


class BulkIntakeInput(BaseModel):
    taken: bool = True


class MagicLinkInput(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        v = v.strip()
        if '@' not in v:
            raise ValueError('Email address must contain @')
        return v
