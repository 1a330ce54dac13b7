import logging
from datetime import timedelta
from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlmodel import SQLModel

from barberin.core.clock import utcnow
from barberin.core.config import ACCESS_TOKEN_EXPIRE_MINUTES, ALGORITHM, SECRET_KEY
from barberin.core.errors import AuthError, ForbiddenError, InvalidTokenError

logger = logging.getLogger(__name__)


ROLE_USER = "user"
ROLE_BARBERSHOP = "barbershop"
ROLES = (ROLE_USER, ROLE_BARBERSHOP)


# =========================
# HASH DE SENHA
# =========================

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    # contas criadas via Google não têm senha
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


# =========================
# TOKEN JWT
# =========================

class TokenPayload(SQLModel):
    subject_id: int
    role: str
    iat: Optional[int] = None
    exp: int


def create_access_token(
    subject_id: int,
    role: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    if role not in ROLES:
        raise ValueError(f"Unknown role: {role}")

    now = utcnow()
    expire = now + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))

    to_encode = {"sub": str(subject_id), "role": role, "iat": now, "exp": expire}
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> TokenPayload:
    """
    Verifica assinatura e expiração.
    Qualquer falha vira InvalidTokenError (401).
    """
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as exc:
        raise InvalidTokenError("Invalid token") from exc

    subject = payload.get("sub")
    role = payload.get("role")

    if subject is None or role not in ROLES:
        raise InvalidTokenError("Invalid token")

    try:
        subject_id = int(subject)
    except (TypeError, ValueError) as exc:
        raise InvalidTokenError("Invalid token") from exc

    return TokenPayload(
        subject_id=subject_id,
        role=role,
        iat=payload.get("iat"),
        exp=payload["exp"],
    )


# =========================
# IDENTIDADE AUTENTICADA
# =========================

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/users/login", auto_error=False)


def get_token_payload(token: Optional[str] = Depends(oauth2_scheme)) -> TokenPayload:
    if not token:
        raise AuthError("Token not provided")

    try:
        return decode_access_token(token)
    except InvalidTokenError:
        logger.info("Rejected bearer token")
        raise


def require_role(role: str):
    """Dependência que só deixa passar tokens com o papel indicado."""

    def dependency(payload: TokenPayload = Depends(get_token_payload)) -> TokenPayload:
        if payload.role != role:
            raise ForbiddenError("Access denied")
        return payload

    return dependency


# =========================
# SOMENTE CLIENTE
# =========================

get_current_user = require_role(ROLE_USER)


# =========================
# SOMENTE BARBEARIA
# =========================

get_current_barbershop = require_role(ROLE_BARBERSHOP)
