from typing import List

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from barberin.core import responses
from barberin.core.security import TokenPayload, get_current_user, get_token_payload
from barberin.core.validators import is_valid_email, is_valid_password, is_valid_phone, sanitize_string
from barberin.database import get_session
from barberin.models.user import LoginRequest, UserRegister, UserUpdate
from barberin.services.user_service import UserService, public_user

router = APIRouter(prefix="/api/users", tags=["users"])


def _registration_errors(payload: UserRegister) -> List[str]:
    errors = []
    if not payload.first_name or len(payload.first_name.strip()) < 2:
        errors.append("First name required (minimum 2 characters)")
    if not payload.last_name or len(payload.last_name.strip()) < 2:
        errors.append("Last name required (minimum 2 characters)")
    if not is_valid_email(payload.email):
        errors.append("Invalid email")
    if payload.phone and not is_valid_phone(payload.phone):
        errors.append("Invalid phone number")
    if not is_valid_password(payload.password):
        errors.append("Password must have at least 6 characters")
    return errors


@router.post("/register")
def register(payload: UserRegister, session: Session = Depends(get_session)):
    errors = _registration_errors(payload)
    if errors:
        return responses.validation_error(errors)

    user = UserService(session).create_user({
        "first_name": sanitize_string(payload.first_name),
        "last_name": sanitize_string(payload.last_name),
        "email": payload.email.lower().strip(),
        "phone": payload.phone.strip() if payload.phone else None,
        "password": payload.password,
        "address": sanitize_string(payload.address),
        "age_range": payload.age_range,
    })

    return responses.success(user, "User registered successfully", 201)


@router.post("/login")
def login(payload: LoginRequest, session: Session = Depends(get_session)):
    if not payload.email or not payload.password:
        return responses.validation_error(["Email and password are required"])

    result = UserService(session).login_user(payload.email.lower().strip(), payload.password)
    return responses.success(result, "Login successful")


@router.get("")
def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    session: Session = Depends(get_session),
    current: TokenPayload = Depends(get_token_payload),
):
    users = UserService(session).get_all_users(page, limit)
    return responses.success(users, "Users retrieved successfully")


# =========================
# PERFIL (CLIENTE LOGADO)
# =========================

@router.get("/profile")
def get_profile(
    session: Session = Depends(get_session),
    current_user: TokenPayload = Depends(get_current_user),
):
    user = UserService(session).get_user_by_id(current_user.subject_id)
    if not user:
        return responses.not_found("User not found")

    return responses.success({"user": public_user(user)}, "Profile retrieved")


@router.put("/profile")
def update_profile(
    payload: UserUpdate,
    session: Session = Depends(get_session),
    current_user: TokenPayload = Depends(get_current_user),
):
    errors = []
    if payload.first_name is not None and len(payload.first_name.strip()) < 2:
        errors.append("First name must have at least 2 characters")
    if payload.last_name is not None and len(payload.last_name.strip()) < 2:
        errors.append("Last name must have at least 2 characters")
    if payload.phone and not is_valid_phone(payload.phone):
        errors.append("Invalid phone number")
    if errors:
        return responses.validation_error(errors)

    data = payload.model_dump(exclude_none=True)
    for field in ("first_name", "last_name", "address"):
        if field in data:
            data[field] = sanitize_string(data[field])
    if "phone" in data:
        data["phone"] = data["phone"].strip()

    updated = UserService(session).update_user(current_user.subject_id, data)
    if not updated:
        return responses.not_found("User not found")

    return responses.success(message="Profile updated successfully")
