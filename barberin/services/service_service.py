import logging
from typing import List, Optional

from sqlmodel import Session, select

from barberin.core.errors import ForbiddenError, NotFoundError
from barberin.models.appointment import Appointment
from barberin.models.barbershop import Barbershop
from barberin.models.service import Service

logger = logging.getLogger(__name__)


class ServiceService:
    """Catálogo de serviços (corte, barba...) de cada barbearia."""

    def __init__(self, session: Session):
        self.session = session

    def get_service_by_id(self, service_id: int) -> Optional[Service]:
        return self.session.get(Service, service_id)

    def get_services_by_barbershop(self, barbershop_id: int, only_active: bool = False) -> List[Service]:
        query = select(Service).where(Service.barbershop_id == barbershop_id)
        if only_active:
            query = query.where(Service.is_active == True)  # noqa: E712
        return self.session.exec(query.order_by(Service.service_id)).all()

    def create_service(self, barbershop_id: int, data: dict) -> Service:
        if not self.session.get(Barbershop, barbershop_id):
            raise NotFoundError("Barbershop not found")

        service = Service(**data, barbershop_id=barbershop_id)
        self.session.add(service)
        self.session.commit()
        self.session.refresh(service)
        logger.info("Service %s added to barbershop %s", service.service_id, barbershop_id)
        return service

    def _owned(self, service_id: int, barbershop_id: int) -> Optional[Service]:
        service = self.get_service_by_id(service_id)
        if not service:
            return None
        if service.barbershop_id != barbershop_id:
            raise ForbiddenError("Access denied")
        return service

    def update_service(self, service_id: int, barbershop_id: int, data: dict) -> bool:
        service = self._owned(service_id, barbershop_id)
        if not service:
            return False

        for key, value in data.items():
            setattr(service, key, value)

        self.session.add(service)
        self.session.commit()
        return True

    def delete_service(self, service_id: int, barbershop_id: int) -> bool:
        service = self._owned(service_id, barbershop_id)
        if not service:
            return False

        booked = self.session.exec(
            select(Appointment.appointment_id).where(Appointment.service_id == service_id)
        ).first()

        if booked is not None:
            service.is_active = False
            self.session.add(service)
            logger.info("Service %s deactivated (has appointments)", service_id)
        else:
            self.session.delete(service)

        self.session.commit()
        return True
