"""Profile and Family entities. Profiles are created by the identity provider."""
from typing import Optional

ROLE_ADMIN = "admin"
ROLE_MEMBER = "member"


class Family:
    def __init__(self, id: str, name: str):
        self.id = id
        self.name = name

    def __str__(self) -> str:
        return f"{self.name} ({self.id})"

    __repr__ = __str__


class Profile:
    def __init__(self, id: str, email: str = "", family_id: Optional[str] = None,
                 role: str = ROLE_MEMBER):
        self.id = id
        self.email = email
        self.family_id = family_id
        self.role = role if role in (ROLE_ADMIN, ROLE_MEMBER) else ROLE_MEMBER

    @property
    def has_family(self) -> bool:
        return bool(self.family_id)

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def __str__(self) -> str:
        return f"{self.email} [{self.role}] family={self.family_id or '-'}"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        return Profile(
            id=str(d.get("id") or ""),
            email=d.get("email") or "",
            family_id=d.get("family_id") or None,
            role=d.get("role") or ROLE_MEMBER,
        )

    def to_dict(self):
        return {"id": self.id, "email": self.email, "family_id": self.family_id, "role": self.role}
