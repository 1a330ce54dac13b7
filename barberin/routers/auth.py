"""
Login com Google (OAuth 2.0, authorization code).

/auth/google redireciona para a tela de consentimento; o Google volta em
/auth/google/callback, trocamos o code por um access token, lemos o perfil
e devolvemos o nosso JWT para o frontend via redirect.
"""

import logging
from datetime import timedelta
from typing import Optional
from urllib.parse import urlencode

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse
from jose import JWTError, jwt
from sqlmodel import Session

from barberin.core import responses
from barberin.core.clock import utcnow
from barberin.core.config import (
    ALGORITHM,
    FRONTEND_URL,
    GOOGLE_CLIENT_ID,
    GOOGLE_CLIENT_SECRET,
    GOOGLE_REDIRECT_URI,
    SECRET_KEY,
)
from barberin.core.errors import ConflictError
from barberin.core.security import ROLE_BARBERSHOP, ROLE_USER, ROLES, create_access_token
from barberin.database import get_session
from barberin.services.barbershop_service import BarbershopService
from barberin.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"  # noqa: S105
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v3/userinfo"
GOOGLE_SCOPES = ["openid", "email", "profile"]

STATE_PURPOSE = "google_oauth"
STATE_EXPIRE_MINUTES = 10


class GoogleAuthError(Exception):
    pass


def google_configured() -> bool:
    return bool(GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET)


def create_state_token(role: str) -> str:
    expire = utcnow() + timedelta(minutes=STATE_EXPIRE_MINUTES)
    return jwt.encode({"purpose": STATE_PURPOSE, "role": role, "exp": expire}, SECRET_KEY, algorithm=ALGORITHM)


def read_state_token(state: str) -> str:
    try:
        payload = jwt.decode(state, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as exc:
        raise GoogleAuthError("Invalid or expired state") from exc

    if payload.get("purpose") != STATE_PURPOSE or payload.get("role") not in ROLES:
        raise GoogleAuthError("Invalid state")
    return payload["role"]


def fetch_google_profile(code: str) -> dict:
    """Troca o authorization code pelo perfil do usuário no Google."""
    with httpx.Client(timeout=10) as client:
        token_response = client.post(
            GOOGLE_TOKEN_URL,
            data={
                "code": code,
                "client_id": GOOGLE_CLIENT_ID,
                "client_secret": GOOGLE_CLIENT_SECRET,
                "redirect_uri": GOOGLE_REDIRECT_URI,
                "grant_type": "authorization_code",
            },
        )
        if token_response.status_code != 200:
            logger.error("Google token exchange failed: %s", token_response.text)
            raise GoogleAuthError("Could not exchange authorization code")

        access_token = token_response.json().get("access_token")
        if not access_token:
            raise GoogleAuthError("No access token in Google response")

        profile_response = client.get(
            GOOGLE_USERINFO_URL,
            headers={"Authorization": f"Bearer {access_token}"},
        )
        if profile_response.status_code != 200:
            logger.error("Google userinfo request failed: %s", profile_response.text)
            raise GoogleAuthError("Could not read Google profile")

    profile = profile_response.json()
    if not profile.get("sub") or not profile.get("email"):
        raise GoogleAuthError("Google profile without email")
    if profile.get("email_verified") is False:
        raise GoogleAuthError("Google email is not verified")
    return profile


def _frontend_redirect(path: str, params: dict) -> RedirectResponse:
    return RedirectResponse(f"{FRONTEND_URL}{path}?{urlencode(params)}")


@router.get("/google")
def google_login(role: str = ROLE_USER):
    if not google_configured():
        return responses.error("Google login is not configured", 503)

    if role not in ROLES:
        return responses.validation_error([f"Role must be one of: {', '.join(ROLES)}"])

    params = {
        "client_id": GOOGLE_CLIENT_ID,
        "redirect_uri": GOOGLE_REDIRECT_URI,
        "response_type": "code",
        "scope": " ".join(GOOGLE_SCOPES),
        "state": create_state_token(role),
        "prompt": "select_account",
    }
    return RedirectResponse(f"{GOOGLE_AUTH_URL}?{urlencode(params)}")


@router.get("/google/callback")
def google_callback(
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    session: Session = Depends(get_session),
):
    if not google_configured():
        return responses.error("Google login is not configured", 503)

    try:
        if error:
            raise GoogleAuthError(f"Google returned an error: {error}")
        if not code or not state:
            raise GoogleAuthError("Missing code or state")

        role = read_state_token(state)
        profile = fetch_google_profile(code)
        email = profile["email"].lower().strip()

        if role == ROLE_BARBERSHOP:
            # barbearia precisa de cadastro completo antes
            barbershop = BarbershopService(session).get_barbershop_by_email(email)
            if not barbershop:
                raise GoogleAuthError("No barbershop registered with this email")
            subject_id = barbershop.barbershop_id
        else:
            user = UserService(session).get_or_create_google_user(
                google_id=profile["sub"],
                email=email,
                first_name=profile.get("given_name"),
                last_name=profile.get("family_name"),
                photo_url=profile.get("picture"),
            )
            subject_id = user.user_id

    except (GoogleAuthError, ConflictError, httpx.HTTPError) as exc:
        logger.warning("Google login failed: %s", exc)
        return _frontend_redirect("/login", {"error": str(exc) or "Google login failed"})

    token = create_access_token(subject_id, role)
    return _frontend_redirect("/auth/callback", {"token": token, "role": role})
