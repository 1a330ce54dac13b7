from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session

from barberin.core import responses
from barberin.core.errors import ForbiddenError
from barberin.core.security import TokenPayload, get_current_barbershop, get_current_user
from barberin.core.validators import sanitize_string
from barberin.database import get_session
from barberin.models.appointment import APPOINTMENT_STATUSES, AppointmentCreate, AppointmentStatusUpdate
from barberin.services.appointment_service import AppointmentService

router = APIRouter(prefix="/api/appointments", tags=["appointments"])


# =========================
# CRIAR AGENDAMENTO (CLIENTE)
# =========================
@router.post("")
def create_appointment(
    payload: AppointmentCreate,
    session: Session = Depends(get_session),
    current_user: TokenPayload = Depends(get_current_user),
):
    errors = []
    if payload.barbershop_id is None:
        errors.append("Barbershop is required")
    if payload.appointment_date is None:
        errors.append("Appointment date is required")
    elif payload.appointment_date < date.today():
        errors.append("Appointment date cannot be in the past")
    if payload.appointment_time is None:
        errors.append("Appointment time is required")
    if errors:
        return responses.validation_error(errors)

    data = payload.model_dump()
    data["notes"] = sanitize_string(data["notes"])

    appointment = AppointmentService(session).create_appointment(current_user.subject_id, data)
    return responses.success({"appointment": appointment}, "Appointment created successfully", 201)


# =========================
# LISTAR AGENDAMENTOS
# - cliente: só os próprios
# - barbearia: só os da agenda dela
# =========================
@router.get("/my")
def list_my_appointments(
    session: Session = Depends(get_session),
    current_user: TokenPayload = Depends(get_current_user),
):
    appointments = AppointmentService(session).get_appointments_by_user(current_user.subject_id)
    return responses.success({"appointments": appointments}, "Appointments retrieved")


@router.get("/barbershop/{barbershop_id}")
def list_barbershop_appointments(
    barbershop_id: int,
    status: Optional[str] = None,
    session: Session = Depends(get_session),
    current_barbershop: TokenPayload = Depends(get_current_barbershop),
):
    if barbershop_id != current_barbershop.subject_id:
        raise ForbiddenError("Access denied")

    if status is not None and status not in APPOINTMENT_STATUSES:
        return responses.validation_error([f"Status must be one of: {', '.join(APPOINTMENT_STATUSES)}"])

    appointments = AppointmentService(session).get_appointments_by_barbershop(barbershop_id, status)
    return responses.success({"appointments": appointments}, "Appointments retrieved")


# =========================
# MUDAR STATUS (BARBEARIA)
# =========================
@router.patch("/{appointment_id}/status")
def update_appointment_status(
    appointment_id: int,
    payload: AppointmentStatusUpdate,
    session: Session = Depends(get_session),
    current_barbershop: TokenPayload = Depends(get_current_barbershop),
):
    if not payload.status:
        return responses.validation_error(["Status is required"])

    updated = AppointmentService(session).update_status(
        appointment_id, current_barbershop.subject_id, payload.status
    )
    if not updated:
        return responses.not_found("Appointment not found")

    return responses.success(message="Appointment status updated")


# =========================
# CANCELAR (CLIENTE)
# =========================
@router.patch("/{appointment_id}/cancel")
def cancel_appointment(
    appointment_id: int,
    session: Session = Depends(get_session),
    current_user: TokenPayload = Depends(get_current_user),
):
    cancelled = AppointmentService(session).cancel_appointment(appointment_id, current_user.subject_id)
    if not cancelled:
        return responses.not_found("Appointment not found")

    return responses.success(message="Appointment cancelled")
