from enum import Enum
from typing import Final


class TimeSlot(str, Enum):
    """Daily dosing periods. Values are the strings stored in the backend."""
    MORNING = "Mattina"
    MIDDAY = "Mezzogiorno"
    EVENING = "Sera"

    @property
    def label(self) -> str:
        return SLOT_LABELS[self]

    @classmethod
    def parse(cls, value) -> "TimeSlot":
        """Accept a stored value, an enum name or an English label."""
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for slot in cls:
            if text in (slot.value, slot.name) or text.lower() == SLOT_LABELS[slot].lower():
                return slot
        raise ValueError(f"Unknown time slot: {value!r}")


class Location(str, Enum):
    ON_HAND = "Box"
    RESERVE = "Dispensa"


class StockStatus(str, Enum):
    BELOW_THRESHOLD = "below threshold"
    UNDER_ONE_WEEK = "coverage under one week"
    OK = "OK"

    @property
    def tone(self) -> str:
        return STATUS_TONES[self]


SLOT_LABELS: Final[dict] = {
    TimeSlot.MORNING: "Morning",
    TimeSlot.MIDDAY: "Midday",
    TimeSlot.EVENING: "Evening",
}
TIME_SLOTS: Final[tuple] = (TimeSlot.MORNING, TimeSlot.MIDDAY, TimeSlot.EVENING)
STATUS_TONES: Final[dict] = {
    StockStatus.BELOW_THRESHOLD: "red",
    StockStatus.UNDER_ONE_WEEK: "amber",
    StockStatus.OK: "green",
}

DATE_FORMAT: Final[str] = "%Y-%m-%d"
DAYS_PER_WEEK: Final[int] = 7
DEFAULT_PER_DOSE: Final[int] = 1
DEFAULT_THRESHOLD: Final[int] = 10

# Backend collections
PROFILES_TABLE: Final[str] = "profiles"
FAMILIES_TABLE: Final[str] = "families"
MEDS_TABLE: Final[str] = "meds"
STOCKS_TABLE: Final[str] = "stocks"
INTAKE_TABLE: Final[str] = "intake_logs"
INTAKE_CONFLICT_TARGET: Final[str] = "family_id,day,time_slot,med_id"
