from models.base_model import Base, BaseModel
from sqlalchemy import Column, String, Enum
from sqlalchemy.orm import relationship

ROLES = ("admin", "moderator", "user")


class User(BaseModel, Base):
    __tablename__ = "users"
    name = Column(String(50), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    role = Column(Enum(*ROLES, name="user_role"), nullable=False, default="user")
    password_hash = Column(String(255), nullable=False)

    refresh_tokens = relationship(
        "RefreshToken",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    invalid_tokens = relationship(
        "InvalidToken",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
