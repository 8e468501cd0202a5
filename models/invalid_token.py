from sqlalchemy import Column, String, Integer, ForeignKey
from sqlalchemy.orm import relationship
from models.base_model import BaseModel, Base


class InvalidToken(BaseModel, Base):
    """Access token revoked before its natural expiry (logout)."""
    __tablename__ = "invalid_tokens"

    access_token = Column(String(512), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # epoch seconds, copied from the token's own exp claim
    expiration_time = Column(Integer, nullable=False)

    user = relationship("User", back_populates="invalid_tokens")

    def __repr__(self):
        return f"<InvalidToken user_id={self.user_id} exp={self.expiration_time}>"
