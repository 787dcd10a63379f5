"""Intake log repository, scoped to one family.

A row with ``taken=true`` means the dose was taken; "not taken" is the
absence of a row, so unmarking deletes instead of writing ``taken=false``.
"""
from datetime import date
from typing import Dict, List

from pillbox.domain.IntakeLog import IntakeKey, IntakeLog
from pillbox.infra.supabase_client import execute
from pillbox.utilities.constants import INTAKE_TABLE, INTAKE_CONFLICT_TARGET, DATE_FORMAT


class IntakeRepository:
    def __init__(self, client, family_id: str):
        self.client = client
        self.family_id = family_id

    def _table(self):
        return self.client.table(INTAKE_TABLE)

    def _match(self, query, key: IntakeKey):
        return (query.eq("family_id", self.family_id)
                .eq("day", key.day.strftime(DATE_FORMAT))
                .eq("time_slot", key.slot.value)
                .eq("med_id", key.med_id))

    def load_range(self, start: date, end: date) -> Dict[IntakeKey, bool]:
        rows = execute(
            self._table().select("day,time_slot,med_id,taken")
            .eq("family_id", self.family_id)
            .gte("day", start.strftime(DATE_FORMAT))
            .lte("day", end.strftime(DATE_FORMAT)),
            "load intake",
        )
        state: Dict[IntakeKey, bool] = {}
        for row in rows:
            log = IntakeLog.from_dict(row)
            state[log.key] = log.taken
        return state

    def is_taken(self, key: IntakeKey) -> bool:
        rows = execute(self._match(self._table().select("taken"), key).limit(1), "read intake")
        return bool(rows and rows[0].get("taken"))

    def upsert_taken(self, key: IntakeKey) -> None:
        log = IntakeLog(key.day, key.slot, key.med_id, family_id=self.family_id, taken=True)
        execute(self._table().upsert(log.to_dict(), on_conflict=INTAKE_CONFLICT_TARGET), "upsert intake")

    def delete(self, key: IntakeKey) -> None:
        execute(self._match(self._table().delete(), key), "delete intake")

    def history(self, med_id: str) -> List[IntakeLog]:
        rows = execute(
            self._table().select("family_id,day,time_slot,med_id,taken")
            .eq("family_id", self.family_id)
            .eq("med_id", med_id)
            .order("day"),
            "intake history",
        )
        return [IntakeLog.from_dict(r) for r in rows]

    def delete_for_med(self, med_id: str) -> None:
        execute(self._table().delete().eq("med_id", med_id).eq("family_id", self.family_id),
                "delete intake history")
