# kushalwear/data/models/user.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, JSON, String

from kushalwear.data.database import Base


def _now():
    return datetime.now(timezone.utc)


class UserModel(Base):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=lambda: uuid.uuid4().hex)
    name = Column(String(50), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)

    role = Column(String(20), nullable=False, default="user")  # user, admin
    is_active = Column(Boolean, nullable=False, default=True)

    phone = Column(String(30), nullable=True)
    address = Column(JSON, nullable=True)  # street, city, state, zipCode, country
    avatar = Column(String(500), nullable=True)
    last_login = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
