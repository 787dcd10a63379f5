import logging

from fastapi import APIRouter, Depends

from pillbox.api.dependencies import Household, get_household
from pillbox.utilities.validators import MedicationInput, MedicationUpdateInput

router = APIRouter(prefix="/api/meds")
logger = logging.getLogger(__name__)


@router.get("")
def list_meds(household: Household = Depends(get_household)):
    meds = household.catalog.list_active()
    return {"count": len(meds), "meds": [m.to_json() for m in meds]}


@router.post("", status_code=201)
def create_med(payload: MedicationInput, household: Household = Depends(get_household)):
    med = household.catalog.create(payload)
    levels = household.ledger.current(med.id)
    return {"med": med.to_json(), "stock": levels.to_dict()}


@router.get("/{med_id}")
def get_med(med_id: str, household: Household = Depends(get_household)):
    return household.catalog.get(med_id).to_json()


@router.put("/{med_id}")
def update_med(med_id: str, payload: MedicationUpdateInput, household: Household = Depends(get_household)):
    return household.catalog.update(med_id, payload).to_json()


@router.post("/{med_id}/archive")
def archive_med(med_id: str, household: Household = Depends(get_household)):
    household.catalog.archive(med_id)
    return {"status": "archived", "med_id": med_id}


@router.delete("/{med_id}")
def delete_med(med_id: str, household: Household = Depends(get_household)):
    household.catalog.hard_delete(med_id)
    return {"status": "deleted", "med_id": med_id}
