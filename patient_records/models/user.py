"""
Account model for registered users.
"""

from __future__ import annotations

from sqlalchemy import Column, String, DateTime, func

from patient_records.core.database import Base


class User(Base):
    """Registered account; identity for token issuance."""

    __tablename__ = "users"

    user_id = Column(String(36), primary_key=True)
    username = Column(String(20), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    def __repr__(self) -> str:
        return f"<User(user_id={self.user_id}, username={self.username})>"
