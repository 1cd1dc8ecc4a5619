"""
Persistence repositories.
"""

from patient_records.repositories.accounts import AccountRepository
from patient_records.repositories.base import DuplicateRecordError, StorageError
from patient_records.repositories.patients import PatientRepository

__all__ = [
    "AccountRepository",
    "DuplicateRecordError",
    "PatientRepository",
    "StorageError",
]
