"""IntakeLog domain entity: one recorded dose, keyed by (day, slot, medication) within a family."""
from datetime import date, datetime
from typing import NamedTuple, Optional

from pillbox.utilities.constants import TimeSlot, DATE_FORMAT


class IntakeKey(NamedTuple):
    day: date
    slot: TimeSlot
    med_id: str


def parse_day(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(str(value)[:10], DATE_FORMAT).date()


class IntakeLog:
    def __init__(self, day: date, slot: TimeSlot, med_id: str,
                 family_id: Optional[str] = None, taken: bool = True):
        self.day = day
        self.slot = slot
        self.med_id = med_id
        self.family_id = family_id
        self.taken = taken

    @property
    def key(self) -> IntakeKey:
        return IntakeKey(self.day, self.slot, self.med_id)

    def __str__(self) -> str:
        return f"{self.day.strftime(DATE_FORMAT)} {self.slot.label} {self.med_id} taken={self.taken}"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        return IntakeLog(
            day=parse_day(d["day"]),
            slot=TimeSlot.parse(d["time_slot"]),
            med_id=str(d["med_id"]),
            family_id=d.get("family_id"),
            taken=bool(d.get("taken", False)),
        )

    def to_dict(self):
        return {
            "family_id": self.family_id,
            "day": self.day.strftime(DATE_FORMAT),
            "time_slot": self.slot.value,
            "med_id": self.med_id,
            "taken": self.taken,
        }
