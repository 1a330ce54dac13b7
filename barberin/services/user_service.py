import logging
import math
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, func, select

from barberin.core.clock import utcnow
from barberin.core.errors import AuthError, ConflictError
from barberin.core.security import ROLE_USER, create_access_token, get_password_hash, verify_password
from barberin.models.user import User

logger = logging.getLogger(__name__)


def public_user(user: User) -> dict:
    return user.model_dump(exclude={"password_hash", "google_id"})


class UserService:
    def __init__(self, session: Session):
        self.session = session

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.session.exec(select(User).where(User.email == email)).first()

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        return self.session.get(User, user_id)

    def create_user(self, data: dict) -> dict:
        data = dict(data)
        password = data.pop("password")

        if self.get_user_by_email(data["email"]):
            raise ConflictError("User with this email already exists")

        user = User(**data, password_hash=get_password_hash(password))
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError as exc:
            # corrida entre duas requisições com o mesmo email
            self.session.rollback()
            raise ConflictError("User with this email already exists") from exc

        self.session.refresh(user)
        logger.info("User %s registered", user.user_id)
        return public_user(user)

    def login_user(self, email: str, password: str) -> dict:
        user = self.get_user_by_email(email)

        if not user or not verify_password(password, user.password_hash):
            logger.info("Failed login for user email %s", email)
            raise AuthError("Invalid credentials")

        token = create_access_token(user.user_id, ROLE_USER)
        return {"token": token, "user": public_user(user)}

    def update_user(self, user_id: int, data: dict) -> bool:
        user = self.get_user_by_id(user_id)
        if not user:
            return False

        for key, value in data.items():
            setattr(user, key, value)
        user.updated_at = utcnow()

        self.session.add(user)
        self.session.commit()
        return True

    def get_all_users(self, page: int = 1, limit: int = 10) -> dict:
        page = max(page, 1)
        limit = max(limit, 1)

        total = self.session.exec(select(func.count()).select_from(User)).one()
        users = self.session.exec(
            select(User).order_by(User.user_id).offset((page - 1) * limit).limit(limit)
        ).all()

        return {
            "users": [public_user(u) for u in users],
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "pages": math.ceil(total / limit) if total else 0,
            },
        }

    def get_or_create_google_user(
        self,
        google_id: str,
        email: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        photo_url: Optional[str] = None,
    ) -> User:
        user = self.session.exec(select(User).where(User.google_id == google_id)).first()
        if user:
            return user

        user = self.get_user_by_email(email)
        if user:
            if user.google_id and user.google_id != google_id:
                logger.warning("User %s is already linked to another Google account", user.user_id)
                raise ConflictError("Account is already linked to another Google account")

            # conta já existia com senha: só vincula o Google
            user.google_id = google_id
            if not user.profile_photo_url:
                user.profile_photo_url = photo_url
            user.updated_at = utcnow()
        else:
            user = User(
                first_name=first_name or email.split("@")[0],
                last_name=last_name or "",
                email=email,
                google_id=google_id,
                profile_photo_url=photo_url,
            )
            logger.info("Creating user from Google account")

        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        return user
