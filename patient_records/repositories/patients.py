"""Repository for patient record persistence."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select

from patient_records.models.patient import Patient
from patient_records.repositories.base import SqlRepository


class PatientRepository(SqlRepository):
    async def list_all(self) -> List[Patient]:
        async with self._reading():
            result = await self.session.execute(select(Patient).order_by(Patient.created_at))
            return list(result.scalars().all())

    async def get(self, patient_id: str) -> Optional[Patient]:
        async with self._reading():
            result = await self.session.execute(
                select(Patient).where(Patient.patient_id == patient_id)
            )
            return result.scalar_one_or_none()

    async def add(self, patient: Patient) -> Patient:
        async with self._writing():
            self.session.add(patient)
        return patient

    async def save(self, patient: Patient) -> Patient:
        async with self._writing():
            self.session.add(patient)
        return patient

    async def delete(self, patient: Patient) -> None:
        async with self._writing():
            await self.session.delete(patient)
