from fastapi import APIRouter, Depends

from pillbox.api.dependencies import Household, get_household
from pillbox.logic.inventory.ledger import compute_stock_snapshots, parse_count, parse_quantity
from pillbox.utilities.validators import QuantityInput

router = APIRouter(prefix="/api/stocks")


def _snapshot(med, levels):
    return compute_stock_snapshots([med], {med.id: levels})[0]


@router.get("")
def list_stocks(household: Household = Depends(get_household)):
    meds = household.catalog.list_active()
    levels = household.ledger.levels([m.id for m in meds])
    items = compute_stock_snapshots(meds, levels)
    return {"count": len(items), "items": items}


# Quantities are parsed before any backend read.

@router.post("/{med_id}/transfer")
def transfer_from_reserve(med_id: str, payload: QuantityInput, household: Household = Depends(get_household)):
    qty = parse_quantity(payload.qty)
    med = household.catalog.get_active(med_id)
    return _snapshot(med, household.ledger.transfer_from_reserve(med_id, qty))


@router.post("/{med_id}/restock")
def restock_reserve(med_id: str, payload: QuantityInput, household: Household = Depends(get_household)):
    qty = parse_quantity(payload.qty)
    med = household.catalog.get_active(med_id)
    return _snapshot(med, household.ledger.restock_reserve(med_id, qty))


@router.put("/{med_id}/on-hand")
def set_on_hand(med_id: str, payload: QuantityInput, household: Household = Depends(get_household)):
    qty = parse_count(payload.qty)
    med = household.catalog.get_active(med_id)
    return _snapshot(med, household.ledger.set_on_hand(med_id, qty))


@router.put("/{med_id}/reserve")
def set_reserve(med_id: str, payload: QuantityInput, household: Household = Depends(get_household)):
    qty = parse_count(payload.qty)
    med = household.catalog.get_active(med_id)
    return _snapshot(med, household.ledger.set_reserve(med_id, qty))
