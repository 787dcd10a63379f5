"""FastAPI dependencies: settings, backend client, signed-in profile, household services."""
from datetime import date
from typing import Optional

from fastapi import Depends, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from pillbox.domain.Profile import Profile
from pillbox.infra.Intake_Repository import IntakeRepository
from pillbox.infra.Medication_Repository import MedicationRepository
from pillbox.infra.Profile_Repository import ProfileRepository
from pillbox.infra.Stock_Repository import StockRepository
from pillbox.infra.supabase_client import resolve_user_id
from pillbox.logic.catalog.medications import MedicationCatalog
from pillbox.logic.intake.tracker import IntakeTracker
from pillbox.logic.inventory.ledger import InventoryLedger
from pillbox.logic.session.profiles import ProfileResolver
from pillbox.utilities.config import Settings
from pillbox.utilities.errors import NotAuthenticated

bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_today(request: Request) -> date:
    return request.app.state.clock()


def get_access_token(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> str:
    if credentials is None or not credentials.credentials:
        raise NotAuthenticated("Missing bearer token")
    return credentials.credentials


def get_anonymous_client(request: Request, settings: Settings = Depends(get_settings)):
    return request.app.state.client_factory(settings.require(), None)


def get_client(request: Request, token: str = Depends(get_access_token),
               settings: Settings = Depends(get_settings)):
    return request.app.state.client_factory(settings.require(), token)


def get_user_id(client=Depends(get_client), token: str = Depends(get_access_token)) -> str:
    return resolve_user_id(client, token)


def get_profile(client=Depends(get_client), user_id: str = Depends(get_user_id),
                settings: Settings = Depends(get_settings),
                family_name: Optional[str] = Query(default=None, max_length=120)) -> Profile:
    resolver = ProfileResolver(ProfileRepository(client), settings.default_family_name)
    return resolver.resolve(user_id, family_name)


class Household:
    """Services for the signed-in user's family, sharing one backend client."""

    def __init__(self, client, profile: Profile, settings: Settings, clock):
        self.profile = profile
        self.family_id = profile.family_id
        meds = MedicationRepository(client)
        stocks = StockRepository(client)
        intakes = IntakeRepository(client, profile.family_id)
        self.catalog = MedicationCatalog(meds, stocks, intakes, profile.family_id)
        self.ledger = InventoryLedger(stocks)
        self.tracker = IntakeTracker(intakes, self.ledger,
                                     guard_transitions=settings.guard_transitions,
                                     max_workers=settings.bulk_max_workers,
                                     clock=clock)


def get_household(request: Request, client=Depends(get_client),
                  profile: Profile = Depends(get_profile),
                  settings: Settings = Depends(get_settings)) -> Household:
    return Household(client, profile, settings, request.app.state.clock)
