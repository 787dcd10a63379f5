from fastapi import APIRouter, Depends

from pillbox.api.dependencies import Household, get_household
from pillbox.utilities.validators import BulkIntakeInput, IntakeInput

router = APIRouter(prefix="/api/intake")


@router.post("")
def set_taken(payload: IntakeInput, household: Household = Depends(get_household)):
    med = household.catalog.get_active(payload.med_id)
    on_hand = household.tracker.set_taken(payload.day, payload.slot, med, payload.taken)
    return {
        "day": payload.day.isoformat(),
        "slot": payload.slot.value,
        "med_id": med.id,
        "taken": payload.taken,
        "on_hand": on_hand,
    }


@router.post("/today")
def set_all_today(payload: BulkIntakeInput, household: Household = Depends(get_household)):
    """Mark every dose planned for today taken (or not taken)."""
    meds = household.catalog.list_active()
    result = household.tracker.set_all_today(meds, payload.taken)
    return result.to_dict()
