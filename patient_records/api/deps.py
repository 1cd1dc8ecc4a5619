"""
FastAPI dependency wiring for repositories and services.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from patient_records.core.database import get_db
from patient_records.core.security import (
    PasswordHasher,
    TokenService,
    get_password_hasher,
    get_token_service,
)
from patient_records.repositories.accounts import AccountRepository
from patient_records.repositories.patients import PatientRepository
from patient_records.services.accounts import AccountDirectory
from patient_records.services.patients import PatientRegistry


def get_account_repository(db: AsyncSession = Depends(get_db)) -> AccountRepository:
    return AccountRepository(db)


def get_patient_repository(db: AsyncSession = Depends(get_db)) -> PatientRepository:
    return PatientRepository(db)


def get_account_directory(
    repository: AccountRepository = Depends(get_account_repository),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
) -> AccountDirectory:
    return AccountDirectory(repository, hasher, tokens)


def get_patient_registry(
    repository: PatientRepository = Depends(get_patient_repository),
) -> PatientRegistry:
    return PatientRegistry(repository)
