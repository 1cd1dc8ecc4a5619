"""
Patient registry: CRUD over patient records.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import List

from patient_records.core.results import ErrorKind, Failure, Ok, Result
from patient_records.models.patient import Patient
from patient_records.repositories.base import StorageError
from patient_records.repositories.patients import PatientRepository
from patient_records.schemas.patients import PatientCreate, PatientResponse, PatientUpdate

logger = logging.getLogger(__name__)

PATIENT_NOT_FOUND = "Patient not found."


class PatientRegistry:
    def __init__(self, repository: PatientRepository):
        self.repository = repository

    async def create(self, payload: PatientCreate) -> Result[str]:
        now = datetime.now(timezone.utc)
        patient = Patient(
            patient_id=str(uuid.uuid4()),
            created_at=now,
            updated_at=now,
            **payload.model_dump(),
        )
        try:
            await self.repository.add(patient)
        except StorageError as exc:
            return Failure(ErrorKind.INTERNAL, "Failed to add patient.", detail=str(exc))
        logger.info("Created patient %s", patient.patient_id)
        return Ok(patient.patient_id)

    async def list_patients(self) -> Result[List[PatientResponse]]:
        try:
            patients = await self.repository.list_all()
        except StorageError as exc:
            return Failure(ErrorKind.INTERNAL, "Failed to list patients.", detail=str(exc))
        if not patients:
            return Failure(ErrorKind.NOT_FOUND, "No patients found.")
        return Ok([PatientResponse.model_validate(p) for p in patients])

    async def get(self, patient_id: str) -> Result[PatientResponse]:
        try:
            patient = await self.repository.get(patient_id)
        except StorageError as exc:
            return Failure(ErrorKind.INTERNAL, "Failed to fetch patient.", detail=str(exc))
        if patient is None:
            return Failure(ErrorKind.NOT_FOUND, PATIENT_NOT_FOUND)
        return Ok(PatientResponse.model_validate(patient))

    async def update(self, patient_id: str, update: PatientUpdate) -> Result[None]:
        try:
            patient = await self.repository.get(patient_id)
            if patient is None:
                return Failure(ErrorKind.NOT_FOUND, PATIENT_NOT_FOUND)
            for field, value in update.changes().items():
                setattr(patient, field, value)
            patient.updated_at = datetime.now(timezone.utc)
            await self.repository.save(patient)
        except StorageError as exc:
            return Failure(ErrorKind.INTERNAL, "Failed to update patient.", detail=str(exc))
        return Ok(None)

    async def delete(self, patient_id: str) -> Result[None]:
        try:
            patient = await self.repository.get(patient_id)
            if patient is None:
                return Failure(ErrorKind.NOT_FOUND, PATIENT_NOT_FOUND)
            await self.repository.delete(patient)
        except StorageError as exc:
            return Failure(ErrorKind.INTERNAL, "Failed to delete patient.", detail=str(exc))
        logger.info("Deleted patient %s", patient_id)
        return Ok(None)
