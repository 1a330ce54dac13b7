import logging

from sqlmodel import Session, select

from barberin.core.security import get_password_hash
from barberin.database import create_db_and_tables, engine
from barberin.models.barber import Barber
from barberin.models.barbershop import Barbershop
from barberin.models.service import Service

logger = logging.getLogger(__name__)


DEMO_EMAIL = "demo@barberin.com"
DEMO_PASSWORD = "barberin123"


def main():
    create_db_and_tables()

    with Session(engine) as session:
        # 1) barbearia demo (cria se não existir)
        barbershop = session.exec(select(Barbershop).where(Barbershop.email == DEMO_EMAIL)).first()
        if not barbershop:
            barbershop = Barbershop(
                name="Barberin Centro",
                email=DEMO_EMAIL,
                phone="+57 300 123 4567",
                password_hash=get_password_hash(DEMO_PASSWORD),
                address="Calle 72 # 45-10, Barranquilla",
                latitude=10.9878,
                longitude=-74.7889,
                responsible_person="Carlos Mendoza",
                id_document="1234567890",
                description="Cortes clásicos y modernos",
            )
            session.add(barbershop)
            session.commit()
            session.refresh(barbershop)

        # 2) barbeiros de teste (se não existir nenhum)
        existing_barber = session.exec(
            select(Barber).where(Barber.barbershop_id == barbershop.barbershop_id)
        ).first()

        if not existing_barber:
            session.add_all(
                [
                    Barber(barbershop_id=barbershop.barbershop_id, first_name="Andrés", last_name="Pérez", specialty="Fade"),
                    Barber(barbershop_id=barbershop.barbershop_id, first_name="Luis", last_name="Gómez", specialty="Barba"),
                ]
            )

        # 3) serviços de teste (se não existir nenhum)
        existing_service = session.exec(
            select(Service).where(Service.barbershop_id == barbershop.barbershop_id)
        ).first()

        if not existing_service:
            session.add_all(
                [
                    Service(barbershop_id=barbershop.barbershop_id, service_name="Corte", duration_minutes=30, price=25000),
                    Service(barbershop_id=barbershop.barbershop_id, service_name="Barba", duration_minutes=20, price=15000),
                    Service(barbershop_id=barbershop.barbershop_id, service_name="Corte + Barba", duration_minutes=50, price=35000),
                ]
            )

        session.commit()

        logger.info("Seed finished: barbershop %s (%s)", barbershop.barbershop_id, DEMO_EMAIL)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main()
