"""
Account directory: registration, authentication, and profile management.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import List

from patient_records.core.metrics import record_auth_event
from patient_records.core.results import ErrorKind, Failure, Ok, Result
from patient_records.core.security import PasswordHasher, TokenClaims, TokenService
from patient_records.models.user import User
from patient_records.repositories.accounts import AccountRepository
from patient_records.repositories.base import DuplicateRecordError, StorageError
from patient_records.schemas.accounts import (
    AccountSummary,
    AccountUpdate,
    LoginRequest,
    RegistrationRequest,
)

logger = logging.getLogger(__name__)

ACCOUNT_NOT_FOUND = "User with the given ID was not found."
DUPLICATE_ACCOUNT = "Username or email is already in use."


def _internal(message: str, exc: Exception) -> Failure:
    return Failure(ErrorKind.INTERNAL, message, detail=str(exc))


class AccountDirectory:
    """
    Owns user-account business logic.

    Every operation returns ``Ok`` or ``Failure``; storage errors are caught
    here and never escape to the caller.
    """

    def __init__(
        self,
        repository: AccountRepository,
        hasher: PasswordHasher,
        tokens: TokenService,
    ):
        self.repository = repository
        self.hasher = hasher
        self.tokens = tokens

    async def list_accounts(self) -> Result[List[AccountSummary]]:
        try:
            users = await self.repository.list_all()
        except StorageError as exc:
            return _internal("Failed to list users.", exc)
        return Ok([AccountSummary.model_validate(user) for user in users])

    async def get_account(self, user_id: str) -> Result[AccountSummary]:
        try:
            user = await self.repository.get(user_id)
        except StorageError as exc:
            return _internal("Failed to fetch user.", exc)
        if user is None:
            return Failure(ErrorKind.NOT_FOUND, ACCOUNT_NOT_FOUND)
        return Ok(AccountSummary.model_validate(user))

    async def register(self, registration: RegistrationRequest) -> Result[str]:
        """
        Create an account and return its new identifier.

        The username/email lookup only short-circuits the common case; the
        unique constraints decide concurrent registrations.
        """
        try:
            existing = await self.repository.find_by_username_or_email(
                registration.username, registration.email
            )
            if existing is not None:
                record_auth_event("register", "conflict")
                return Failure(ErrorKind.CONFLICT, DUPLICATE_ACCOUNT)

            password_hash = await self.hasher.hash_async(registration.password)
            now = datetime.now(timezone.utc)
            user = User(
                user_id=str(uuid.uuid4()),
                username=registration.username,
                email=registration.email,
                password_hash=password_hash,
                full_name=registration.full_name,
                created_at=now,
                updated_at=now,
            )
            await self.repository.add(user)
        except DuplicateRecordError:
            record_auth_event("register", "conflict")
            return Failure(ErrorKind.CONFLICT, DUPLICATE_ACCOUNT)
        except (StorageError, ValueError) as exc:
            record_auth_event("register", "error")
            return _internal("Failed to create user.", exc)

        record_auth_event("register", "success")
        logger.info("Registered user %s", user.user_id)
        return Ok(user.user_id)

    async def authenticate(self, credentials: LoginRequest) -> Result[str]:
        """Check a username/password pair and issue an access token."""
        try:
            user = await self.repository.get_by_username(credentials.username)
            if user is None:
                await self.hasher.dummy_verify_async()
                record_auth_event("login", "unknown_user")
                return Failure(ErrorKind.NOT_FOUND, "User not found.")

            valid = await self.hasher.verify_async(credentials.password, user.password_hash)
        except (StorageError, ValueError) as exc:
            record_auth_event("login", "error")
            return _internal("An error occurred during login.", exc)

        if not valid:
            record_auth_event("login", "invalid_password")
            logger.info("Rejected login for user %s", user.user_id)
            return Failure(ErrorKind.INVALID_CREDENTIAL, "Incorrect password.")

        record_auth_event("login", "success")
        token = self.tokens.issue(TokenClaims(user_id=user.user_id, username=user.username))
        return Ok(token)

    async def update_account(self, user_id: str, update: AccountUpdate) -> Result[None]:
        """Apply a partial update; a new password is re-hashed before storage."""
        changes = update.changes()
        try:
            user = await self.repository.get(user_id)
            if user is None:
                return Failure(ErrorKind.NOT_FOUND, ACCOUNT_NOT_FOUND)

            password = changes.pop("password", None)
            if password is not None:
                user.password_hash = await self.hasher.hash_async(password)
            for field, value in changes.items():
                setattr(user, field, value)
            user.updated_at = datetime.now(timezone.utc)

            await self.repository.save(user)
        except DuplicateRecordError:
            return Failure(ErrorKind.CONFLICT, DUPLICATE_ACCOUNT)
        except (StorageError, ValueError) as exc:
            return _internal("Failed to update user.", exc)

        logger.info("Updated user %s", user_id)
        return Ok(None)

    async def delete_account(self, user_id: str) -> Result[None]:
        try:
            user = await self.repository.get(user_id)
            if user is None:
                return Failure(ErrorKind.NOT_FOUND, ACCOUNT_NOT_FOUND)
            await self.repository.delete(user)
        except StorageError as exc:
            return _internal("Failed to delete user.", exc)

        logger.info("Deleted user %s", user_id)
        return Ok(None)
