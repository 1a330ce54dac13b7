import logging
from typing import List, Optional

from sqlmodel import Session, select

from barberin.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from barberin.models.appointment import (
    APPOINTMENT_STATUSES,
    STATUS_CANCELLED,
    STATUS_COMPLETED,
    STATUS_PENDING,
    Appointment,
)
from barberin.models.barber import Barber
from barberin.models.barbershop import Barbershop
from barberin.models.service import Service

logger = logging.getLogger(__name__)

FINAL_STATUSES = (STATUS_CANCELLED, STATUS_COMPLETED)


class AppointmentService:
    def __init__(self, session: Session):
        self.session = session

    def get_appointment_by_id(self, appointment_id: int) -> Optional[Appointment]:
        return self.session.get(Appointment, appointment_id)

    def get_appointments_by_barbershop(self, barbershop_id: int, status: Optional[str] = None) -> List[Appointment]:
        query = select(Appointment).where(Appointment.barbershop_id == barbershop_id)
        if status:
            query = query.where(Appointment.status == status)
        return self.session.exec(
            query.order_by(Appointment.appointment_date, Appointment.appointment_time)
        ).all()

    def get_appointments_by_user(self, user_id: int) -> List[Appointment]:
        return self.session.exec(
            select(Appointment)
            .where(Appointment.user_id == user_id)
            .order_by(Appointment.appointment_date, Appointment.appointment_time)
        ).all()

    def create_appointment(self, user_id: int, data: dict) -> Appointment:
        barbershop_id = data["barbershop_id"]
        if not self.session.get(Barbershop, barbershop_id):
            raise NotFoundError("Barbershop not found")

        errors = []

        barber_id = data.get("barber_id")
        if barber_id is not None:
            barber = self.session.get(Barber, barber_id)
            if not barber or barber.barbershop_id != barbershop_id or not barber.is_active:
                errors.append("Barber does not belong to this barbershop")

        service_id = data.get("service_id")
        if service_id is not None:
            service = self.session.get(Service, service_id)
            if not service or service.barbershop_id != barbershop_id or not service.is_active:
                errors.append("Service does not belong to this barbershop")

        if errors:
            raise ValidationError(errors)

        # mesmo barbeiro, mesmo horário
        if barber_id is not None:
            taken = self.session.exec(
                select(Appointment).where(
                    Appointment.barber_id == barber_id,
                    Appointment.appointment_date == data["appointment_date"],
                    Appointment.appointment_time == data["appointment_time"],
                    Appointment.status != STATUS_CANCELLED,
                )
            ).first()
            if taken:
                raise ConflictError("Barber already has an appointment at this time")

        appointment = Appointment(**data, user_id=user_id, status=STATUS_PENDING)
        self.session.add(appointment)
        self.session.commit()
        self.session.refresh(appointment)
        logger.info("Appointment %s booked at barbershop %s", appointment.appointment_id, barbershop_id)
        return appointment

    def update_status(self, appointment_id: int, barbershop_id: int, status: str) -> bool:
        if status not in APPOINTMENT_STATUSES:
            raise ValidationError([f"Status must be one of: {', '.join(APPOINTMENT_STATUSES)}"])

        appointment = self.get_appointment_by_id(appointment_id)
        if not appointment:
            return False
        if appointment.barbershop_id != barbershop_id:
            raise ForbiddenError("Access denied")

        # cancelado e finalizado não voltam atrás
        if appointment.status in FINAL_STATUSES and status != appointment.status:
            raise ValidationError([f"Cannot change status of a {appointment.status} appointment"])

        appointment.status = status
        self.session.add(appointment)
        self.session.commit()
        return True

    def cancel_appointment(self, appointment_id: int, user_id: int) -> bool:
        appointment = self.get_appointment_by_id(appointment_id)
        if not appointment:
            return False
        if appointment.user_id != user_id:
            raise ForbiddenError("Access denied")

        if appointment.status == STATUS_COMPLETED:
            raise ValidationError(["Completed appointments cannot be cancelled"])

        appointment.status = STATUS_CANCELLED
        self.session.add(appointment)
        self.session.commit()
        return True
