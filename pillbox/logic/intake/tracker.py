"""Intake tracking: mark a scheduled dose taken or not taken.

Marking taken upserts the (family, day, slot, medication) row; unmarking
deletes it. Either way the medication's on-hand stock moves by its
pills-per-dose: down when taken, back up when untaken.

With ``guard_transitions`` off (the default) the stock side effect fires on
every call, even when the log was already in the requested state, so two
"taken" calls for the same dose decrement on-hand twice while the log keeps
a single row. With it on, the current log state is read first and the stock
only moves on an actual transition.
"""
from __future__ import annotations
import logging
from concurrent.futures import ThreadPoolExecutor, wait
from datetime import date
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from pillbox.domain.IntakeLog import IntakeKey
from pillbox.domain.Medication import Medication
from pillbox.logic.inventory.ledger import InventoryLedger
from pillbox.logic.planner.week import planned_doses
from pillbox.utilities.constants import TimeSlot
from pillbox.utilities.errors import NotFound, PillboxError

logger = logging.getLogger(__name__)

__all__ = ["IntakeTracker", "BulkResult"]


class BulkResult:
    """Outcome of a bulk toggle. Failures are reported, never rolled back."""

    def __init__(self, day: date, desired: bool):
        self.day = day
        self.desired = desired
        self.planned = 0
        self.changed: List[IntakeKey] = []
        self.failed: List[dict] = []
        self.state: Dict[IntakeKey, bool] = {}

    @property
    def ok(self) -> bool:
        return not self.failed

    def to_dict(self):
        return {
            "day": self.day.isoformat(),
            "taken": self.desired,
            "planned": self.planned,
            "ok": self.ok,
            "changed": len(self.changed),
            "failed": self.failed,
            "state": [
                {"slot": k.slot.value, "med_id": k.med_id, "taken": v}
                for k, v in sorted(self.state.items(), key=lambda kv: (kv[0].slot.value, kv[0].med_id))
            ],
        }


class IntakeTracker:
    def __init__(self, intakes, ledger: InventoryLedger, guard_transitions: bool = False,
                 max_workers: int = 8, clock: Callable[[], date] = date.today):
        self.intakes = intakes
        self.ledger = ledger
        self.guard_transitions = guard_transitions
        self.max_workers = max(1, max_workers)
        self.clock = clock

    def load_range(self, start: date, end: date) -> Dict[IntakeKey, bool]:
        return self.intakes.load_range(start, end)

    def set_taken(self, day: date, slot: TimeSlot, med: Medication, desired: bool) -> Optional[int]:
        """Record the dose state and apply the on-hand side effect.

        Returns the new on-hand quantity, or None when the guard skipped the
        stock update because nothing changed.
        """
        if med.archived:
            raise NotFound(f"Medication {med.id} is archived")
        key = IntakeKey(day, slot, med.id)
        previous = self.intakes.is_taken(key) if self.guard_transitions else None

        if desired:
            self.intakes.upsert_taken(key)
        else:
            self.intakes.delete(key)

        if previous is not None and previous == desired:
            logger.debug("Intake %s already %s; stock untouched", key, desired)
            return None

        delta = -med.per_dose if desired else med.per_dose
        new_qty = self.ledger.adjust_on_hand(med.id, delta)
        logger.info("Intake %s %s on %s: Box now %s", med.name, slot.label,
                    day.isoformat(), new_qty)
        return new_qty

    def _toggle_slots(self, day: date, med: Medication, slots: List[TimeSlot],
                      desired: bool) -> List[Tuple[TimeSlot, Optional[PillboxError]]]:
        """Toggle the slots of one medication one after another."""
        outcomes = []
        for slot in slots:
            try:
                self.set_taken(day, slot, med, desired)
            except PillboxError as e:
                outcomes.append((slot, e))
            else:
                outcomes.append((slot, None))
        return outcomes

    def set_all_today(self, medications: Iterable[Medication], desired: bool) -> BulkResult:
        """Bring every dose planned for today to ``desired``.

        Only entries whose tracked state differs are toggled. Medications are
        processed concurrently, the slots of one medication sequentially, so
        two toggles never race on the same on-hand row. Once all settle the
        day's state is reloaded.
        """
        today = self.clock()
        result = BulkResult(today, desired)
        doses = planned_doses(medications)
        result.planned = len(doses)
        current = self.intakes.load_range(today, today)

        pending: Dict[str, Tuple[Medication, List[TimeSlot]]] = {}
        for med, slot in doses:
            if bool(current.get(IntakeKey(today, slot, med.id))) != desired:
                pending.setdefault(med.id, (med, []))[1].append(slot)

        if pending:
            with ThreadPoolExecutor(max_workers=min(self.max_workers, len(pending))) as pool:
                futures = {pool.submit(self._toggle_slots, today, med, slots, desired): med
                           for med, slots in pending.values()}
                wait(futures)
            for future, med in futures.items():
                for slot, error in future.result():
                    if error is None:
                        result.changed.append(IntakeKey(today, slot, med.id))
                        continue
                    logger.warning("Bulk intake failed for %s %s: %s", med.name, slot.label, error)
                    result.failed.append({"med_id": med.id, "slot": slot.value, "error": error.to_dict()})

        reloaded = self.intakes.load_range(today, today)
        result.state = {IntakeKey(today, slot, med.id): bool(reloaded.get(IntakeKey(today, slot, med.id)))
                        for med, slot in doses}
        return result
