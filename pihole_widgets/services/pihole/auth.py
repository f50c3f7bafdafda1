"""
Pi-hole Auth — Exchange the configured secret for a session token.

POST {base}/api/auth with {"password": secret}. The appliance answers
{"session": {"sid": str | null, "valid": bool, "message": str}}.

An appliance without a password answers sid=null, valid=true,
message="no password set". That is a successful unauthenticated session,
not an error. No retries, no caching: every refresh cycle authenticates anew.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from pihole_widgets.models.pihole import Session
from pihole_widgets.services.pihole.errors import AuthError

logger = logging.getLogger(__name__)

AUTH_PATH = "/api/auth"
_NO_PASSWORD_MESSAGE = "no password set"


def _session_block(resp: httpx.Response) -> dict[str, Any] | None:
    """Extract the session object from an auth response, if any."""
    try:
        data = resp.json()
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    session = data.get("session")
    return session if isinstance(session, dict) else None


async def authenticate(
    http: httpx.AsyncClient,
    base_address: str,
    secret: str | None,
) -> Session:
    """Establish a session for one refresh cycle.

    Returns Session(token=None) without any network call when no secret is
    configured. Raises AuthError when the appliance yields no usable token.
    """
    if not secret:
        return Session()

    try:
        resp = await http.post(
            f"{base_address}{AUTH_PATH}",
            json={"password": secret},
            headers={"Accept": "application/json"},
        )
    except httpx.HTTPError as e:
        logger.warning("Pi-hole auth: transport error: %s", e.__class__.__name__)
        raise AuthError(f"auth request failed ({e.__class__.__name__})", AUTH_PATH) from e

    session = _session_block(resp)

    if not resp.is_success:
        detail = session.get("message") if session else None
        msg = f"authentication failed ({resp.status_code})"
        if detail:
            msg = f"{msg}: {detail}"
        raise AuthError(msg, AUTH_PATH)

    if session is None or "sid" not in session:
        raise AuthError("no session token")

    sid = session["sid"]
    if sid is None:
        if session.get("valid") is True and session.get("message") == _NO_PASSWORD_MESSAGE:
            logger.info("Pi-hole auth: appliance has no password set, continuing unauthenticated")
            return Session()
        raise AuthError("no session token")

    if not isinstance(sid, str) or not sid:
        raise AuthError("no session token")

    logger.debug("Pi-hole auth: session established")
    return Session(token=sid)
