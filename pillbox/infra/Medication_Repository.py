"""Medication repository (backend persistence of the ``meds`` collection)."""
import logging
from typing import List, Optional

from pillbox.domain.Medication import Medication
from pillbox.infra.supabase_client import execute
from pillbox.utilities.constants import MEDS_TABLE

logger = logging.getLogger(__name__)

MED_COLUMNS = "id,family_id,name,dosage,per_dose,times,threshold,archived"


class MedicationRepository:
    def __init__(self, client):
        self.client = client

    def _table(self):
        return self.client.table(MEDS_TABLE)

    def list_active(self, family_id: str) -> List[Medication]:
        rows = execute(
            self._table().select(MED_COLUMNS)
            .eq("family_id", family_id)
            .eq("archived", False)
            .order("name"),
            "list meds",
        )
        meds = [Medication.from_dict(r) for r in rows]
        # The backend collation may differ from Python's; keep a stable name order.
        meds.sort(key=lambda m: (m.name.lower(), m.name))
        return meds

    def get(self, family_id: str, med_id: str) -> Optional[Medication]:
        rows = execute(
            self._table().select(MED_COLUMNS).eq("id", med_id).eq("family_id", family_id).limit(1),
            "get med",
        )
        return Medication.from_dict(rows[0]) if rows else None

    def insert(self, med: Medication) -> Medication:
        rows = execute(self._table().insert(med.to_dict()), "insert med")
        if rows:
            med.id = str(rows[0].get("id"))
        logger.info("Created medication %s (%s)", med.name, med.id)
        return med

    def update(self, med_id: str, fields: dict) -> None:
        execute(self._table().update(fields).eq("id", med_id), "update med")

    def mark_archived(self, med_id: str) -> None:
        self.update(med_id, {"archived": True})

    def delete(self, med_id: str) -> None:
        execute(self._table().delete().eq("id", med_id), "delete med")
