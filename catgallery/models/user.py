"""User model definitions."""

from enum import Enum

from sqlalchemy import Column, Integer, String
from catgallery.database import Base


class Role(str, Enum):
    """Authorization levels a user can hold."""
    USER = "user"
    ADMIN = "admin"


class User(Base):
    """Represents a registered member."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(30), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(16), nullable=False, default=Role.USER.value)  # user/admin
