"""Stock levels of one medication at its two locations."""
from typing import Dict, Iterable

from pillbox.utilities.constants import Location


def clamp(qty: int) -> int:
    return max(0, int(qty))


class StockLevels:
    def __init__(self, on_hand: int = 0, reserve: int = 0):
        self.on_hand = clamp(on_hand)
        self.reserve = clamp(reserve)

    @property
    def total(self) -> int:
        return self.on_hand + self.reserve

    def get(self, location: Location) -> int:
        return self.on_hand if location == Location.ON_HAND else self.reserve

    def __eq__(self, other) -> bool:
        if not isinstance(other, StockLevels):
            return NotImplemented
        return (self.on_hand, self.reserve) == (other.on_hand, other.reserve)

    def __str__(self) -> str:
        return f"Box {self.on_hand} + Dispensa {self.reserve}"

    __repr__ = __str__

    @staticmethod
    def from_rows(rows: Iterable[dict]) -> Dict[str, "StockLevels"]:
        '''Groups backend stock rows by medication. Unknown locations are ignored.'''
        levels: Dict[str, StockLevels] = {}
        for row in rows or []:
            med_id = str(row.get("med_id"))
            current = levels.setdefault(med_id, StockLevels())
            qty = row.get("qty") or 0
            if row.get("location") == Location.ON_HAND.value:
                current.on_hand = clamp(qty)
            elif row.get("location") == Location.RESERVE.value:
                current.reserve = clamp(qty)
        return levels

    def to_dict(self):
        return {"on_hand": self.on_hand, "reserve": self.reserve, "total": self.total}
