# saivd/api/deps.py

import logging

from fastapi import Depends, Request, Response

from saivd.clients.auth_client import AuthClient, AuthSession, AuthUser, get_auth_client
from saivd.core.config import AUTH_ACCESS_COOKIE, AUTH_REFRESH_COOKIE
from saivd.core.errors import unauthorized

logger = logging.getLogger(__name__)

REFRESH_COOKIE_MAX_AGE = 60 * 60 * 24 * 30


def _access_token(request: Request) -> str | None:
    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        token = header[7:].strip()
        if token:
            return token
    return request.cookies.get(AUTH_ACCESS_COOKIE)


def write_session_cookies(response: Response, session: AuthSession) -> None:
    response.set_cookie(AUTH_ACCESS_COOKIE, session.access_token, max_age=session.expires_in,
                        httponly=True, secure=True, samesite="lax", path="/")
    response.set_cookie(AUTH_REFRESH_COOKIE, session.refresh_token, max_age=REFRESH_COOKIE_MAX_AGE,
                        httponly=True, secure=True, samesite="lax", path="/")


async def session_cookie_middleware(request: Request, call_next):
    """Write back a session that get_optional_user refreshed during the request."""
    response = await call_next(request)
    session = getattr(request.state, "refreshed_session", None)
    if session is not None:
        write_session_cookies(response, session)
    return response


def get_optional_user(
    request: Request,
    auth: AuthClient = Depends(get_auth_client),
) -> AuthUser | None:
    """
    Resolve the signed-in user from the bearer token or session cookie.
    An expired access token is refreshed once with the refresh cookie; the
    new session is stored on request.state for session_cookie_middleware.
    """
    token = _access_token(request)
    user = auth.get_user(token) if token else None
    if user is not None:
        return user

    refresh_token = request.cookies.get(AUTH_REFRESH_COOKIE)
    if not refresh_token:
        return None

    session = auth.refresh_session(refresh_token)
    if session is None:
        return None

    logger.info("Session refreshed for user %s", session.user.id)
    request.state.refreshed_session = session
    return session.user


def get_current_user(user: AuthUser | None = Depends(get_optional_user)) -> AuthUser:
    if user is None:
        raise unauthorized()
    return user
