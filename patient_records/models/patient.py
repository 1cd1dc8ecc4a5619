"""
Patient record model.
"""

from __future__ import annotations

from sqlalchemy import Column, String, Integer, DateTime, Text, func

from patient_records.core.database import Base


class Patient(Base):
    """Patient record managed by authenticated users."""

    __tablename__ = "patients"

    patient_id = Column(String(36), primary_key=True)
    name = Column(String(255), nullable=False, index=True)
    age = Column(Integer)
    gender = Column(String(20))
    address = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    def __repr__(self) -> str:
        return f"<Patient(patient_id={self.patient_id}, name={self.name})>"
