from fastapi import APIRouter, Depends

from pillbox.domain.Profile import Profile
from pillbox.infra.supabase_client import send_magic_link, sign_out
from pillbox.utilities.validators import MagicLinkInput
from pillbox.api.dependencies import get_access_token, get_anonymous_client, get_client, get_profile

router = APIRouter()


@router.post("/auth/magic-link")
def request_magic_link(payload: MagicLinkInput, client=Depends(get_anonymous_client)):
    send_magic_link(client, payload.email)
    return {"status": "sent", "email": payload.email}


@router.post("/auth/logout")
def logout(client=Depends(get_client), token: str = Depends(get_access_token)):
    sign_out(client, token)
    return {"status": "signed_out"}


@router.get("/api/profile")
def api_profile(profile: Profile = Depends(get_profile)):
    """Current profile. A profile without a family gets one on first load."""
    return profile.to_dict()
