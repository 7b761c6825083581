import enum

from sqlalchemy import Column, Integer, String, DateTime, Enum as SqlEnum

from comicshelf.database import Base, utcnow


class UserRole(enum.Enum):
    READER = "READER"
    CREATOR = "CREATOR"
    ADMIN = "ADMIN"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    # Null for accounts that only ever signed in through Google
    password = Column(String, nullable=True)
    username = Column(String, nullable=False)
    avatar = Column(String, nullable=True)
    role = Column(SqlEnum(UserRole, name="user_role"), nullable=False, default=UserRole.READER)
    google_id = Column(String, unique=True, index=True, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
