"""Two-location inventory bookkeeping and coverage status.

On-hand ("Box") is depleted by intake; reserve ("Dispensa") is restocked
from the pharmacy and feeds on-hand through transfers. Quantities clamp at
zero on every write.
"""
from __future__ import annotations
import logging
import math
from typing import Dict, Iterable, List, Any

from pillbox.domain.Medication import Medication
from pillbox.domain.Stock import StockLevels, clamp
from pillbox.utilities.constants import Location, StockStatus
from pillbox.utilities.errors import StockLocationMissing, ValidationFailed

logger = logging.getLogger(__name__)

__all__ = ["InventoryLedger", "parse_quantity", "parse_count", "stock_status", "compute_stock_snapshots"]


def parse_quantity(value) -> int:
    """Coerce user input to an int. Non-numeric input raises ValidationFailed."""
    if isinstance(value, bool) or value is None:
        raise ValidationFailed("Quantity must be a number")
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise ValidationFailed("Quantity must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationFailed(f"Quantity must be a number, got {value!r}")
    if math.isnan(number) or math.isinf(number):
        raise ValidationFailed("Quantity must be a finite number")
    if not number.is_integer():
        raise ValidationFailed(f"Quantity must be a whole number of pills, got {value!r}")
    return int(number)


def parse_count(value) -> int:
    """Like ``parse_quantity``, but negative counts are rejected too."""
    qty = parse_quantity(value)
    if qty < 0:
        raise ValidationFailed("Quantity cannot be negative")
    return qty


def stock_status(med: Medication, levels: StockLevels) -> StockStatus:
    total = levels.total
    if total < med.threshold:
        return StockStatus.BELOW_THRESHOLD
    if total < med.weekly_need:
        return StockStatus.UNDER_ONE_WEEK
    return StockStatus.OK


def compute_stock_snapshots(meds: Iterable[Medication], levels: Dict[str, StockLevels]) -> List[Dict[str, Any]]:
    """One entry per medication with levels, weekly need and status, in catalog order."""
    result: List[Dict[str, Any]] = []
    for med in meds:
        current = levels.get(med.id, StockLevels())
        status = stock_status(med, current)
        result.append({
            'med_id': med.id,
            'name': med.name,
            'dosage': med.dosage,
            'threshold': med.threshold,
            'weekly_need': med.weekly_need,
            'on_hand': current.on_hand,
            'reserve': current.reserve,
            'total': current.total,
            'status': status.value,
            'tone': status.tone,
        })
    return result


class InventoryLedger:
    def __init__(self, stocks):
        self.stocks = stocks

    def _row(self, med_id: str, location: Location) -> dict:
        row = self.stocks.find(med_id, location)
        if row is None:
            logger.warning("No %s stock row for medication %s", location.value, med_id)
            raise StockLocationMissing(med_id, location.value)
        return row

    def levels(self, med_ids: Iterable[str]) -> Dict[str, StockLevels]:
        return self.stocks.levels(med_ids)

    def current(self, med_id: str) -> StockLevels:
        return self.stocks.levels([med_id])[med_id]

    def transfer_from_reserve(self, med_id: str, qty) -> StockLevels:
        """Move ``qty`` pills from reserve to on-hand.

        On-hand always receives the full amount; reserve floors at zero even
        when it held fewer pills than requested.
        """
        qty = parse_quantity(qty)
        if qty <= 0:
            return self.current(med_id)
        box = self._row(med_id, Location.ON_HAND)
        reserve = self._row(med_id, Location.RESERVE)
        new_box = clamp((box.get("qty") or 0) + qty)
        new_reserve = clamp((reserve.get("qty") or 0) - qty)
        self.stocks.set_qty(box["id"], new_box)
        self.stocks.set_qty(reserve["id"], new_reserve)
        logger.info("Moved %s pills of %s to Box (Box=%s, Dispensa=%s)", qty, med_id, new_box, new_reserve)
        return StockLevels(new_box, new_reserve)

    def restock_reserve(self, med_id: str, qty) -> StockLevels:
        qty = parse_quantity(qty)
        if qty <= 0:
            return self.current(med_id)
        reserve = self._row(med_id, Location.RESERVE)
        new_reserve = clamp((reserve.get("qty") or 0) + qty)
        self.stocks.set_qty(reserve["id"], new_reserve)
        logger.info("Restocked %s with %s pills (Dispensa=%s)", med_id, qty, new_reserve)
        return self.current(med_id)

    def _set_absolute(self, med_id: str, location: Location, qty) -> StockLevels:
        qty = parse_count(qty)
        row = self._row(med_id, location)
        self.stocks.set_qty(row["id"], qty)
        logger.info("Set %s stock of %s to %s", location.value, med_id, qty)
        return self.current(med_id)

    def set_on_hand(self, med_id: str, qty) -> StockLevels:
        return self._set_absolute(med_id, Location.ON_HAND, qty)

    def set_reserve(self, med_id: str, qty) -> StockLevels:
        return self._set_absolute(med_id, Location.RESERVE, qty)

    def adjust_on_hand(self, med_id: str, delta: int) -> int:
        """Add ``delta`` (possibly negative) to on-hand, clamped at zero. Returns the new quantity."""
        box = self._row(med_id, Location.ON_HAND)
        new_box = clamp((box.get("qty") or 0) + delta)
        self.stocks.set_qty(box["id"], new_box)
        return new_box
