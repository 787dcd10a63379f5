"""Medication domain entity: name, dosage text, pills per dose, scheduled slots, low-stock threshold."""
from typing import List, Optional

from pillbox.utilities.constants import TimeSlot, DAYS_PER_WEEK, DEFAULT_PER_DOSE, DEFAULT_THRESHOLD
from pillbox.utilities.validators import normalize_slots


class Medication:
    def __init__(self, id: str = "", family_id: Optional[str] = None, name: str = "",
                 dosage: Optional[str] = None, per_dose: int = DEFAULT_PER_DOSE,
                 times: Optional[List[TimeSlot]] = None, threshold: int = DEFAULT_THRESHOLD,
                 archived: bool = False):
        self.id = id
        self.family_id = family_id
        self.name = name
        self.dosage = dosage
        self.per_dose = per_dose
        self.times = normalize_slots(times)
        self.threshold = threshold
        self.archived = archived

    def is_scheduled(self, slot: TimeSlot) -> bool:
        return slot in self.times

    @property
    def weekly_need(self) -> int:
        '''Pills consumed over 7 days at the current schedule.'''
        return self.per_dose * len(self.times) * DAYS_PER_WEEK

    @property
    def label(self) -> str:
        return f"{self.name} – {self.dosage}" if self.dosage else self.name

    def __str__(self) -> str:
        slots = ", ".join(s.label for s in self.times) or "-"
        return f"{self.label} ({self.per_dose} pill/dose; {slots})"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        '''Creates a Medication from a backend row. Ignores unknown keys.'''
        d = dict(data) if isinstance(data, dict) else {}
        return Medication(
            id=str(d.get("id") or ""),
            family_id=d.get("family_id"),
            name=d.get("name") or "",
            dosage=d.get("dosage") or None,
            per_dose=int(d.get("per_dose") or DEFAULT_PER_DOSE),
            times=d.get("times") or [],
            threshold=int(d.get("threshold") if d.get("threshold") is not None else DEFAULT_THRESHOLD),
            archived=bool(d.get("archived", False)),
        )

    def to_dict(self):
        '''Converts the Medication to the backend row shape (without id).'''
        return {
            "family_id": self.family_id,
            "name": self.name,
            "dosage": self.dosage,
            "per_dose": self.per_dose,
            "times": [slot.value for slot in self.times],
            "threshold": self.threshold,
            "archived": self.archived,
        }

    def to_json(self):
        '''Shape returned by the API.'''
        data = self.to_dict()
        data["id"] = self.id
        data["slots"] = [slot.label for slot in self.times]
        data["weekly_need"] = self.weekly_need
        return data
