import logging
from typing import List, Optional

from sqlmodel import Session, select

from barberin.core.errors import ForbiddenError, NotFoundError
from barberin.models.appointment import Appointment
from barberin.models.barber import Barber
from barberin.models.barbershop import Barbershop

logger = logging.getLogger(__name__)


class BarberService:
    def __init__(self, session: Session):
        self.session = session

    def get_barber_by_id(self, barber_id: int) -> Optional[Barber]:
        return self.session.get(Barber, barber_id)

    def get_barbers_by_barbershop(self, barbershop_id: int, only_active: bool = False) -> List[Barber]:
        query = select(Barber).where(Barber.barbershop_id == barbershop_id)
        if only_active:
            query = query.where(Barber.is_active == True)  # noqa: E712
        return self.session.exec(query.order_by(Barber.barber_id)).all()

    def create_barber(self, barbershop_id: int, data: dict) -> Barber:
        if not self.session.get(Barbershop, barbershop_id):
            raise NotFoundError("Barbershop not found")

        barber = Barber(**data, barbershop_id=barbershop_id)
        self.session.add(barber)
        self.session.commit()
        self.session.refresh(barber)
        logger.info("Barber %s added to barbershop %s", barber.barber_id, barbershop_id)
        return barber

    def _owned(self, barber_id: int, barbershop_id: int) -> Optional[Barber]:
        barber = self.get_barber_by_id(barber_id)
        if not barber:
            return None
        if barber.barbershop_id != barbershop_id:
            raise ForbiddenError("Access denied")
        return barber

    def update_barber(self, barber_id: int, barbershop_id: int, data: dict) -> bool:
        barber = self._owned(barber_id, barbershop_id)
        if not barber:
            return False

        for key, value in data.items():
            setattr(barber, key, value)

        self.session.add(barber)
        self.session.commit()
        return True

    def delete_barber(self, barber_id: int, barbershop_id: int) -> bool:
        barber = self._owned(barber_id, barbershop_id)
        if not barber:
            return False

        booked = self.session.exec(
            select(Appointment.appointment_id).where(Appointment.barber_id == barber_id)
        ).first()

        # agendamentos apontam para o barbeiro: só desativa
        if booked is not None:
            barber.is_active = False
            self.session.add(barber)
            logger.info("Barber %s deactivated (has appointments)", barber_id)
        else:
            self.session.delete(barber)

        self.session.commit()
        return True
