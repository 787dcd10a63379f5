"""Supabase client construction and call helpers.

There is no module-level client: the app builds one per request from its
``Settings`` and the caller's access token, so row-level security on the
backend sees the signed-in user.
"""
import logging
from typing import Optional

from supabase import AuthError, Client, ClientOptions, PostgrestAPIError, create_client

from pillbox.utilities.config import Settings
from pillbox.utilities.errors import BackendError, NotAuthenticated

logger = logging.getLogger(__name__)


def create_backend_client(settings: Settings, access_token: Optional[str] = None) -> Client:
    """Create a client bound to the project, optionally acting as ``access_token``'s user."""
    settings.require()
    if access_token:
        options = ClientOptions(headers={"Authorization": f"Bearer {access_token}"})
    else:
        options = ClientOptions()
    return create_client(settings.supabase_url, settings.supabase_key, options=options)


def execute(query, action: str):
    """Run a query builder and return its rows, translating backend failures."""
    try:
        response = query.execute()
    except PostgrestAPIError as e:
        message = getattr(e, "message", None) or str(e)
        logger.error("Backend call failed (%s): %s", action, message)
        raise BackendError(message) from e
    if response is None:
        return []
    return response.data if response.data is not None else []


def resolve_user_id(client: Client, access_token: str) -> str:
    """Return the id of the user owning ``access_token``."""
    try:
        response = client.auth.get_user(access_token)
    except AuthError as e:
        logger.info("Rejected access token: %s", e)
        raise NotAuthenticated(str(e) or "Invalid session") from e
    user = getattr(response, "user", None)
    if user is None:
        raise NotAuthenticated("Session expired or invalid")
    return str(user.id)


def send_magic_link(client: Client, email: str) -> None:
    """Passwordless sign-in: the identity provider emails a login link."""
    try:
        client.auth.sign_in_with_otp({"email": email})
    except AuthError as e:
        logger.error("Magic link request failed for %s: %s", email, e)
        raise BackendError(str(e)) from e
    logger.info("Magic link sent to %s", email)


def sign_out(client: Client, access_token: str) -> None:
    """Revoke the session behind ``access_token`` on the auth server."""
    try:
        client.auth.admin.sign_out(access_token, scope="local")
    except AuthError as e:
        logger.error("Sign-out failed: %s", e)
        raise BackendError(str(e)) from e
    logger.info("Session revoked")
