import logging
import math
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, func, select

from barberin.core.clock import utcnow
from barberin.core.config import DEFAULT_SEARCH_RADIUS_KM
from barberin.core.errors import AuthError, ConflictError
from barberin.core.security import ROLE_BARBERSHOP, create_access_token, get_password_hash, verify_password
from barberin.models.barbershop import Barbershop
from barberin.models.review import Review

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Distância em km entre dois pontos (lat/lng em graus)."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(a)))


def public_barbershop(barbershop: Barbershop) -> dict:
    return barbershop.model_dump(exclude={"password_hash"})


class BarbershopService:
    def __init__(self, session: Session):
        self.session = session

    def get_barbershop_by_email(self, email: str) -> Optional[Barbershop]:
        return self.session.exec(select(Barbershop).where(Barbershop.email == email)).first()

    def get_barbershop_by_id(self, barbershop_id: int) -> Optional[Barbershop]:
        return self.session.get(Barbershop, barbershop_id)

    def create_barbershop(self, data: dict) -> dict:
        data = dict(data)
        password = data.pop("password")

        if self.get_barbershop_by_email(data["email"]):
            raise ConflictError("Barbershop with this email already exists")

        barbershop = Barbershop(**data, password_hash=get_password_hash(password))
        self.session.add(barbershop)
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise ConflictError("Barbershop with this email already exists") from exc

        self.session.refresh(barbershop)
        logger.info("Barbershop %s registered", barbershop.barbershop_id)
        return public_barbershop(barbershop)

    def login_barbershop(self, email: str, password: str) -> dict:
        barbershop = self.get_barbershop_by_email(email)

        if not barbershop or not verify_password(password, barbershop.password_hash):
            logger.info("Failed login for barbershop email %s", email)
            raise AuthError("Invalid credentials")

        token = create_access_token(barbershop.barbershop_id, ROLE_BARBERSHOP)
        return {"token": token, "barbershop": public_barbershop(barbershop)}

    def update_barbershop(self, barbershop_id: int, data: dict) -> bool:
        barbershop = self.get_barbershop_by_id(barbershop_id)
        if not barbershop:
            return False

        for key, value in data.items():
            setattr(barbershop, key, value)
        barbershop.updated_at = utcnow()

        self.session.add(barbershop)
        self.session.commit()
        return True

    def get_all_barbershops(self, filters: Optional[dict] = None) -> List[dict]:
        """
        Sem coordenadas: todas as barbearias por nome.
        Com latitude/longitude: só as que estão a até `radius` km do ponto
        (inclusive), com o campo `distance`, da mais próxima para a mais distante.
        """
        filters = filters or {}
        latitude = filters.get("latitude")
        longitude = filters.get("longitude")

        if latitude is None or longitude is None:
            barbershops = self.session.exec(select(Barbershop).order_by(Barbershop.name)).all()
            return [public_barbershop(b) for b in barbershops]

        radius = filters.get("radius")
        if radius is None:
            radius = DEFAULT_SEARCH_RADIUS_KM

        candidates = self.session.exec(
            select(Barbershop).where(
                Barbershop.latitude.is_not(None),
                Barbershop.longitude.is_not(None),
            )
        ).all()

        nearby = []
        for b in candidates:
            distance = haversine_km(latitude, longitude, b.latitude, b.longitude)
            if distance <= radius:
                row = public_barbershop(b)
                row["distance"] = round(distance, 2)
                nearby.append((distance, row))

        nearby.sort(key=lambda item: item[0])
        return [row for _, row in nearby]

    def refresh_rating(self, barbershop_id: int) -> None:
        barbershop = self.get_barbershop_by_id(barbershop_id)
        if not barbershop:
            return

        avg, total = self.session.exec(
            select(func.avg(Review.rating), func.count(Review.review_id)).where(
                Review.barbershop_id == barbershop_id
            )
        ).one()

        barbershop.avg_rating = round(float(avg), 2) if total else 0.0
        barbershop.total_reviews = total
        self.session.add(barbershop)
        self.session.commit()
