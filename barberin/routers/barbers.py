from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from barberin.core import responses
from barberin.core.security import TokenPayload, get_current_barbershop
from barberin.core.validators import is_valid_phone, sanitize_string
from barberin.database import get_session
from barberin.models.barber import BarberPayload
from barberin.services.barber_service import BarberService
from barberin.services.barbershop_service import BarbershopService

router = APIRouter(prefix="/api/barbers", tags=["barbers"])


def _barber_errors(payload: BarberPayload, creating: bool) -> List[str]:
    errors = []
    if creating or payload.first_name is not None:
        if not payload.first_name or len(payload.first_name.strip()) < 2:
            errors.append("First name required (minimum 2 characters)")
    if payload.phone and not is_valid_phone(payload.phone):
        errors.append("Invalid phone number")
    return errors


def _clean(payload: BarberPayload) -> dict:
    data = payload.model_dump(exclude_none=True)
    for field in ("first_name", "last_name", "specialty"):
        if field in data:
            data[field] = sanitize_string(data[field])
    if "phone" in data:
        data["phone"] = data["phone"].strip()
    return data


@router.post("")
def create_barber(
    payload: BarberPayload,
    session: Session = Depends(get_session),
    current_barbershop: TokenPayload = Depends(get_current_barbershop),
):
    errors = _barber_errors(payload, creating=True)
    if errors:
        return responses.validation_error(errors)

    barber = BarberService(session).create_barber(current_barbershop.subject_id, _clean(payload))
    return responses.success({"barber": barber}, "Barber created successfully", 201)


@router.get("/barbershop/{barbershop_id}")
def list_barbers(barbershop_id: int, session: Session = Depends(get_session)):
    if not BarbershopService(session).get_barbershop_by_id(barbershop_id):
        return responses.not_found("Barbershop not found")

    barbers = BarberService(session).get_barbers_by_barbershop(barbershop_id)
    return responses.success({"barbers": barbers}, "Barbers retrieved")


@router.get("/{barber_id}")
def get_barber(barber_id: int, session: Session = Depends(get_session)):
    barber = BarberService(session).get_barber_by_id(barber_id)
    if not barber:
        return responses.not_found("Barber not found")

    return responses.success({"barber": barber}, "Barber retrieved")


@router.put("/{barber_id}")
def update_barber(
    barber_id: int,
    payload: BarberPayload,
    session: Session = Depends(get_session),
    current_barbershop: TokenPayload = Depends(get_current_barbershop),
):
    errors = _barber_errors(payload, creating=False)
    if errors:
        return responses.validation_error(errors)

    updated = BarberService(session).update_barber(barber_id, current_barbershop.subject_id, _clean(payload))
    if not updated:
        return responses.not_found("Barber not found")

    return responses.success(message="Barber updated successfully")


@router.delete("/{barber_id}")
def delete_barber(
    barber_id: int,
    session: Session = Depends(get_session),
    current_barbershop: TokenPayload = Depends(get_current_barbershop),
):
    deleted = BarberService(session).delete_barber(barber_id, current_barbershop.subject_id)
    if not deleted:
        return responses.not_found("Barber not found")

    return responses.success(message="Barber removed")
