"""Weekly planner rows.

For each displayed day, slots run in fixed order (Morning, Midday, Evening)
and within a slot every active medication scheduled for it, by name. Only
the first row of a day / slot group carries the visible label; that is a
presentation flag and never changes the data.
"""
from __future__ import annotations
from datetime import date
from typing import Dict, Iterable, List, Tuple

from pillbox.domain.IntakeLog import IntakeKey
from pillbox.domain.Medication import Medication
from pillbox.utilities.constants import TimeSlot, TIME_SLOTS

__all__ = ["PlannerRow", "active_sorted", "planned_doses", "build_rows"]


class PlannerRow:
    def __init__(self, day: date, slot: TimeSlot, medication: Medication, taken: bool,
                 first_of_day: bool, first_of_slot: bool):
        self.day = day
        self.slot = slot
        self.medication = medication
        self.taken = taken
        self.first_of_day = first_of_day
        self.first_of_slot = first_of_slot

    @property
    def key(self) -> IntakeKey:
        return IntakeKey(self.day, self.slot, self.medication.id)

    def to_dict(self):
        return {
            "day": self.day.isoformat(),
            "slot": self.slot.value,
            "slot_label": self.slot.label,
            "med_id": self.medication.id,
            "name": self.medication.name,
            "dosage": self.medication.dosage,
            "per_dose": self.medication.per_dose,
            "taken": self.taken,
            "show_day": self.first_of_day,
            "show_slot": self.first_of_slot,
        }


def active_sorted(medications: Iterable[Medication]) -> List[Medication]:
    return sorted((m for m in medications if not m.archived), key=lambda m: (m.name.lower(), m.name))


def planned_doses(medications: Iterable[Medication]) -> List[Tuple[Medication, TimeSlot]]:
    """(medication, slot) pairs scheduled on any single day, in display order."""
    meds = active_sorted(medications)
    return [(m, slot) for slot in TIME_SLOTS for m in meds if m.is_scheduled(slot)]


def build_rows(days: Iterable[date], medications: Iterable[Medication],
               intakes: Dict[IntakeKey, bool]) -> List[PlannerRow]:
    doses = planned_doses(medications)
    rows: List[PlannerRow] = []
    for day in days:
        first_day = True
        previous_slot = None
        for med, slot in doses:
            rows.append(PlannerRow(
                day, slot, med,
                taken=bool(intakes.get(IntakeKey(day, slot, med.id))),
                first_of_day=first_day,
                first_of_slot=slot != previous_slot,
            ))
            first_day = False
            previous_slot = slot
    return rows
