"""Medication catalog: create, edit, archive and delete medication definitions.

Archiving hides a medication from the planner and inventory and drops its
stock rows, but keeps the intake history. Hard deletion removes history,
stock and the medication itself and cannot be undone.
"""
from __future__ import annotations
import logging
from typing import List, Union

from pydantic import ValidationError

from pillbox.domain.Medication import Medication
from pillbox.utilities.errors import NotFound, ValidationFailed
from pillbox.utilities.validators import MedicationInput, MedicationUpdateInput

logger = logging.getLogger(__name__)

__all__ = ["MedicationCatalog"]

REQUIRED_FIELDS_MESSAGE = "Enter at least a name and one time slot."


def _coerce(fields, schema):
    if isinstance(fields, schema):
        return fields
    try:
        data = fields.model_dump() if hasattr(fields, "model_dump") else dict(fields)
        return schema(**data)
    except ValidationError as e:
        first = e.errors()[0] if e.errors() else {}
        where = ".".join(str(p) for p in first.get("loc", ()))
        raise ValidationFailed(f"{where}: {first.get('msg', 'invalid value')}" if where else str(e))


def _check_required(data: MedicationUpdateInput) -> None:
    if not data.name or not data.times:
        raise ValidationFailed(REQUIRED_FIELDS_MESSAGE)


class MedicationCatalog:
    def __init__(self, meds, stocks, intakes, family_id: str):
        self.meds = meds
        self.stocks = stocks
        self.intakes = intakes
        self.family_id = family_id

    def list_active(self) -> List[Medication]:
        return self.meds.list_active(self.family_id)

    def get(self, med_id: str) -> Medication:
        med = self.meds.get(self.family_id, med_id)
        if med is None:
            raise NotFound(f"Medication {med_id} not found")
        return med

    def get_active(self, med_id: str) -> Medication:
        """Like ``get``, but archived medications are treated as missing."""
        med = self.get(med_id)
        if med.archived:
            raise NotFound(f"Medication {med_id} is archived")
        return med

    def create(self, fields: Union[MedicationInput, dict]) -> Medication:
        data = _coerce(fields, MedicationInput)
        _check_required(data)
        med = Medication(
            family_id=self.family_id,
            name=data.name,
            dosage=data.dosage,
            per_dose=data.per_dose,
            times=data.times,
            threshold=data.threshold,
            archived=False,
        )
        med = self.meds.insert(med)
        self.stocks.insert_pair(med.id, data.initial_on_hand, data.initial_reserve)
        return med

    def update(self, med_id: str, fields: Union[MedicationUpdateInput, dict]) -> Medication:
        data = _coerce(fields, MedicationUpdateInput)
        _check_required(data)
        med = self.get(med_id)
        med.name = data.name
        med.dosage = data.dosage
        med.per_dose = data.per_dose
        med.times = list(data.times)
        self.meds.update(med_id, {
            "name": med.name,
            "dosage": med.dosage,
            "per_dose": med.per_dose,
            "times": [slot.value for slot in med.times],
        })
        logger.info("Updated medication %s", med_id)
        return med

    def archive(self, med_id: str) -> None:
        self.get(med_id)
        self.meds.mark_archived(med_id)
        self.stocks.delete_for(med_id)
        logger.info("Archived medication %s (history kept)", med_id)

    def hard_delete(self, med_id: str) -> None:
        self.get(med_id)
        self.intakes.delete_for_med(med_id)
        self.stocks.delete_for(med_id)
        self.meds.delete(med_id)
        logger.info("Deleted medication %s with its history", med_id)
