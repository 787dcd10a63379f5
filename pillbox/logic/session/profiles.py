"""Profile resolution and lazy family provisioning."""
from __future__ import annotations
import logging
from typing import Optional

from pillbox.domain.Profile import Profile, ROLE_ADMIN
from pillbox.utilities.errors import NotFound

logger = logging.getLogger(__name__)

__all__ = ["ProfileResolver"]


class ProfileResolver:
    def __init__(self, profiles, default_family_name: str = "Famiglia"):
        self.profiles = profiles
        self.default_family_name = default_family_name

    def load(self, user_id: str) -> Profile:
        profile = self.profiles.get(user_id)
        if profile is None:
            raise NotFound(f"No profile for user {user_id}")
        return profile

    def ensure_family(self, profile: Profile, name: Optional[str] = None) -> Profile:
        """Give a profile without a family a new one and make it its admin."""
        if profile.has_family:
            return profile
        family_name = (name or "").strip() or self.default_family_name
        family = self.profiles.create_family(family_name)
        self.profiles.attach_family(profile.id, family.id, ROLE_ADMIN)
        logger.info("Provisioned family %s for %s", family, profile.email)
        profile.family_id = family.id
        profile.role = ROLE_ADMIN
        return profile

    def resolve(self, user_id: str, family_name: Optional[str] = None) -> Profile:
        return self.ensure_family(self.load(user_id), family_name)
