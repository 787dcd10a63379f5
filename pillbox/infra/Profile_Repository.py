"""Profile and family persistence."""
import logging
from typing import Optional

from pillbox.domain.Profile import Family, Profile
from pillbox.infra.supabase_client import execute
from pillbox.utilities.constants import PROFILES_TABLE, FAMILIES_TABLE
from pillbox.utilities.errors import BackendError

logger = logging.getLogger(__name__)


class ProfileRepository:
    def __init__(self, client):
        self.client = client

    def get(self, user_id: str) -> Optional[Profile]:
        rows = execute(
            self.client.table(PROFILES_TABLE).select("id,email,family_id,role").eq("id", user_id).limit(1),
            "load profile",
        )
        return Profile.from_dict(rows[0]) if rows else None

    def create_family(self, name: str) -> Family:
        rows = execute(self.client.table(FAMILIES_TABLE).insert({"name": name}), "create family")
        if not rows or not rows[0].get("id"):
            raise BackendError("Family was not created")
        return Family(str(rows[0]["id"]), rows[0].get("name") or name)

    def attach_family(self, profile_id: str, family_id: str, role: str) -> None:
        execute(
            self.client.table(PROFILES_TABLE).update({"family_id": family_id, "role": role}).eq("id", profile_id),
            "attach family",
        )
        logger.info("Profile %s joined family %s as %s", profile_id, family_id, role)
