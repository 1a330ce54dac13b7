from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from barberin.core import responses
from barberin.core.security import TokenPayload, get_current_barbershop
from barberin.core.validators import (
    is_valid_email,
    is_valid_latitude,
    is_valid_longitude,
    is_valid_password,
    is_valid_phone,
    sanitize_string,
)
from barberin.database import get_session
from barberin.models.barbershop import BarbershopRegister, BarbershopUpdate
from barberin.models.user import LoginRequest
from barberin.services.barbershop_service import BarbershopService, public_barbershop

router = APIRouter(prefix="/api/barbershops", tags=["barbershops"])


def _location_errors(latitude, longitude) -> List[str]:
    errors = []
    if latitude is not None and not is_valid_latitude(latitude):
        errors.append("Invalid latitude")
    if longitude is not None and not is_valid_longitude(longitude):
        errors.append("Invalid longitude")
    return errors


def _registration_errors(payload: BarbershopRegister) -> List[str]:
    errors = []
    if not payload.name or len(payload.name.strip()) < 3:
        errors.append("Barbershop name required (minimum 3 characters)")
    if not is_valid_email(payload.email):
        errors.append("Invalid email")
    if not is_valid_phone(payload.phone):
        errors.append("Invalid phone number")
    if not is_valid_password(payload.password):
        errors.append("Password must have at least 6 characters")
    if not payload.address or len(payload.address.strip()) < 10:
        errors.append("Address required (minimum 10 characters)")
    if not payload.responsible_person or len(payload.responsible_person.strip()) < 5:
        errors.append("Responsible person required")
    if not payload.id_document or len(payload.id_document.strip()) < 6:
        errors.append("Identity document required")
    errors.extend(_location_errors(payload.latitude, payload.longitude))
    return errors


@router.post("/register")
def register(payload: BarbershopRegister, session: Session = Depends(get_session)):
    errors = _registration_errors(payload)
    if errors:
        return responses.validation_error(errors)

    barbershop = BarbershopService(session).create_barbershop({
        "name": sanitize_string(payload.name),
        "email": payload.email.lower().strip(),
        "phone": payload.phone.strip(),
        "password": payload.password,
        "address": sanitize_string(payload.address),
        "latitude": payload.latitude,
        "longitude": payload.longitude,
        "responsible_person": sanitize_string(payload.responsible_person),
        "id_document": payload.id_document.strip(),
        "owner_phone": payload.owner_phone.strip() if payload.owner_phone else None,
        "description": sanitize_string(payload.description),
    })

    return responses.success(barbershop, "Barbershop registered successfully", 201)


@router.post("/login")
def login(payload: LoginRequest, session: Session = Depends(get_session)):
    if not payload.email or not payload.password:
        return responses.validation_error(["Email and password are required"])

    result = BarbershopService(session).login_barbershop(payload.email.lower().strip(), payload.password)
    return responses.success(result, "Login successful")


@router.get("")
def list_barbershops(
    latitude: Optional[float] = Query(None),
    longitude: Optional[float] = Query(None),
    radius: Optional[float] = Query(None, ge=0),
    session: Session = Depends(get_session),
):
    errors = _location_errors(latitude, longitude)
    if errors:
        return responses.validation_error(errors)

    filters = {}
    # raio só vale quando as duas coordenadas vêm juntas
    if latitude is not None and longitude is not None:
        filters = {"latitude": latitude, "longitude": longitude, "radius": radius}

    barbershops = BarbershopService(session).get_all_barbershops(filters)
    return responses.success({"barbershops": barbershops}, "Barbershops retrieved")


# =========================
# PERFIL (BARBEARIA LOGADA)
# =========================

@router.get("/profile")
def get_profile(
    session: Session = Depends(get_session),
    current_barbershop: TokenPayload = Depends(get_current_barbershop),
):
    barbershop = BarbershopService(session).get_barbershop_by_id(current_barbershop.subject_id)
    if not barbershop:
        return responses.not_found("Barbershop not found")

    return responses.success({"barbershop": public_barbershop(barbershop)}, "Profile retrieved")


@router.put("/profile")
def update_profile(
    payload: BarbershopUpdate,
    session: Session = Depends(get_session),
    current_barbershop: TokenPayload = Depends(get_current_barbershop),
):
    errors = []
    if payload.name is not None and len(payload.name.strip()) < 3:
        errors.append("Name must have at least 3 characters")
    if payload.phone and not is_valid_phone(payload.phone):
        errors.append("Invalid phone number")
    if payload.address is not None and len(payload.address.strip()) < 10:
        errors.append("Address must have at least 10 characters")
    errors.extend(_location_errors(payload.latitude, payload.longitude))
    if errors:
        return responses.validation_error(errors)

    data = payload.model_dump(exclude_none=True)
    for field in ("name", "address", "responsible_person", "description"):
        if field in data:
            data[field] = sanitize_string(data[field])
    for field in ("phone", "owner_phone"):
        if field in data:
            data[field] = data[field].strip()

    updated = BarbershopService(session).update_barbershop(current_barbershop.subject_id, data)
    if not updated:
        return responses.not_found("Barbershop not found")

    return responses.success(message="Profile updated successfully")


@router.get("/{barbershop_id}")
def get_barbershop(barbershop_id: int, session: Session = Depends(get_session)):
    barbershop = BarbershopService(session).get_barbershop_by_id(barbershop_id)
    if not barbershop:
        return responses.not_found("Barbershop not found")

    return responses.success({"barbershop": public_barbershop(barbershop)}, "Barbershop retrieved")
