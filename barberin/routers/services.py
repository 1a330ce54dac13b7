from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from barberin.core import responses
from barberin.core.security import TokenPayload, get_current_barbershop
from barberin.core.validators import sanitize_string
from barberin.database import get_session
from barberin.models.service import ServicePayload
from barberin.services.barbershop_service import BarbershopService
from barberin.services.service_service import ServiceService

router = APIRouter(
    prefix="/api/services",
    tags=["services"]
)


def _service_errors(payload: ServicePayload, creating: bool) -> List[str]:
    errors = []
    if creating or payload.service_name is not None:
        if not payload.service_name or len(payload.service_name.strip()) < 2:
            errors.append("Service name required (minimum 2 characters)")
    if creating and payload.price is None:
        errors.append("Price is required")
    if payload.price is not None and payload.price < 0:
        errors.append("Price cannot be negative")
    if payload.duration_minutes is not None and payload.duration_minutes <= 0:
        errors.append("Duration must be greater than zero")
    return errors


def _clean(payload: ServicePayload) -> dict:
    data = payload.model_dump(exclude_none=True)
    for field in ("service_name", "description"):
        if field in data:
            data[field] = sanitize_string(data[field])
    return data


@router.post("")
def create_service(
    payload: ServicePayload,
    session: Session = Depends(get_session),
    current_barbershop: TokenPayload = Depends(get_current_barbershop),
):
    errors = _service_errors(payload, creating=True)
    if errors:
        return responses.validation_error(errors)

    service = ServiceService(session).create_service(current_barbershop.subject_id, _clean(payload))
    return responses.success({"service": service}, "Service created successfully", 201)


@router.get("/barbershop/{barbershop_id}")
def list_services(barbershop_id: int, session: Session = Depends(get_session)):
    if not BarbershopService(session).get_barbershop_by_id(barbershop_id):
        return responses.not_found("Barbershop not found")

    services = ServiceService(session).get_services_by_barbershop(barbershop_id)
    return responses.success({"services": services}, "Services retrieved")


@router.get("/{service_id}")
def get_service(service_id: int, session: Session = Depends(get_session)):
    service = ServiceService(session).get_service_by_id(service_id)
    if not service:
        return responses.not_found("Service not found")

    return responses.success({"service": service}, "Service retrieved")


@router.put("/{service_id}")
def update_service(
    service_id: int,
    payload: ServicePayload,
    session: Session = Depends(get_session),
    current_barbershop: TokenPayload = Depends(get_current_barbershop),
):
    errors = _service_errors(payload, creating=False)
    if errors:
        return responses.validation_error(errors)

    updated = ServiceService(session).update_service(service_id, current_barbershop.subject_id, _clean(payload))
    if not updated:
        return responses.not_found("Service not found")

    return responses.success(message="Service updated successfully")


@router.delete("/{service_id}")
def delete_service(
    service_id: int,
    session: Session = Depends(get_session),
    current_barbershop: TokenPayload = Depends(get_current_barbershop),
):
    deleted = ServiceService(session).delete_service(service_id, current_barbershop.subject_id)
    if not deleted:
        return responses.not_found("Service not found")

    return responses.success(message="Service removed")
