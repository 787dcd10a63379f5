"""Stock repository: one row per (medication, location)."""
from typing import Dict, Iterable, Optional

from pillbox.domain.Stock import StockLevels, clamp
from pillbox.infra.supabase_client import execute
from pillbox.utilities.constants import Location, STOCKS_TABLE


class StockRepository:
    def __init__(self, client):
        self.client = client

    def _table(self):
        return self.client.table(STOCKS_TABLE)

    def levels(self, med_ids: Iterable[str]) -> Dict[str, StockLevels]:
        """Levels per medication. Medications without rows read as zero."""
        ids = [str(i) for i in med_ids]
        if not ids:
            return {}
        rows = execute(self._table().select("med_id,location,qty").in_("med_id", ids), "load stocks")
        found = StockLevels.from_rows(rows)
        return {med_id: found.get(med_id, StockLevels()) for med_id in ids}

    def find(self, med_id: str, location: Location) -> Optional[dict]:
        rows = execute(
            self._table().select("id,qty").eq("med_id", med_id).eq("location", location.value).limit(1),
            f"find {location.value} stock",
        )
        return rows[0] if rows else None

    def insert_pair(self, med_id: str, on_hand: int = 0, reserve: int = 0) -> None:
        execute(self._table().insert([
            {"med_id": med_id, "location": Location.ON_HAND.value, "qty": clamp(on_hand or 0)},
            {"med_id": med_id, "location": Location.RESERVE.value, "qty": clamp(reserve or 0)},
        ]), "insert stocks")

    def set_qty(self, row_id, qty: int) -> None:
        execute(self._table().update({"qty": clamp(qty)}).eq("id", row_id), "update stock")

    def delete_for(self, med_id: str) -> None:
        execute(self._table().delete().eq("med_id", med_id), "delete stocks")
