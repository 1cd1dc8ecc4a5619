"""
Authentication and security utilities: bcrypt hashing, JWT tokens, and the
bearer-token gate for protected routes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext
from pydantic import BaseModel, ValidationError
from starlette.concurrency import run_in_threadpool

from patient_records.core.config import Settings
from patient_records.core.logging import user_id_ctx
from patient_records.core.metrics import record_auth_event
from patient_records.core.results import ErrorKind, Failure, Ok, Result

logger = logging.getLogger(__name__)

# bcrypt only reads the first 72 bytes of its input.
MAX_PASSWORD_BYTES = 72

# Bearer token extractor; missing credentials are handled by the gate itself.
bearer_scheme = HTTPBearer(auto_error=False)


class PasswordHasher:
    """Salted one-way password hashing with a fixed bcrypt cost factor."""

    def __init__(self, rounds: int = 10):
        self.rounds = rounds
        self._context = CryptContext(
            schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds
        )

    def hash(self, plaintext: str) -> str:
        """Hash a password using bcrypt."""
        if len(plaintext.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"password must be <= {MAX_PASSWORD_BYTES} bytes")
        return self._context.hash(plaintext)

    def verify(self, plaintext: str, hashed: str) -> bool:
        """Verify a password against a hash."""
        if len(plaintext.encode("utf-8")) > MAX_PASSWORD_BYTES:
            self.dummy_verify()
            return False
        return self._context.verify(plaintext, hashed)

    def dummy_verify(self) -> None:
        """Spend the cost of one verification without a stored hash."""
        self._context.dummy_verify()

    async def hash_async(self, plaintext: str) -> str:
        return await run_in_threadpool(self.hash, plaintext)

    async def verify_async(self, plaintext: str, hashed: str) -> bool:
        return await run_in_threadpool(self.verify, plaintext, hashed)

    async def dummy_verify_async(self) -> None:
        await run_in_threadpool(self.dummy_verify)


class TokenClaims(BaseModel):
    """Identity claims embedded in an access token."""

    user_id: str
    username: str


@dataclass(frozen=True)
class TokenSettings:
    """Signing configuration, loaded once at process start."""

    secret: str
    algorithm: str = "HS256"
    lifetime: timedelta = timedelta(hours=1)

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenSettings":
        return cls(
            secret=settings.SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
            lifetime=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        )


class TokenService:
    """Issues and verifies stateless, time-limited JWT access tokens."""

    def __init__(self, config: TokenSettings):
        self.config = config

    def issue(self, claims: TokenClaims, now: Optional[datetime] = None) -> str:
        """
        Create a signed access token.

        Args:
            claims: Identity to encode in the token
            now: Issuance time, defaults to the current UTC time

        Returns:
            Encoded JWT token string
        """
        issued_at = now or datetime.now(timezone.utc)
        payload = claims.model_dump()
        payload.update({"iat": issued_at, "exp": issued_at + self.config.lifetime})
        return jwt.encode(payload, self.config.secret, algorithm=self.config.algorithm)

    def verify(self, token: str) -> Result[TokenClaims]:
        """
        Decode a token and check its signature and expiry.

        Returns:
            ``Ok`` with the identity claims, or an ``INVALID_TOKEN`` failure
        """
        try:
            payload = jwt.decode(
                token,
                self.config.secret,
                algorithms=[self.config.algorithm],
                options={"require": ["exp", "iat"]},
            )
            return Ok(TokenClaims(**payload))
        except jwt.ExpiredSignatureError:
            return Failure(ErrorKind.INVALID_TOKEN, "Token has expired")
        except jwt.InvalidTokenError as exc:
            return Failure(ErrorKind.INVALID_TOKEN, "Invalid token", detail=str(exc))
        except ValidationError:
            return Failure(ErrorKind.INVALID_TOKEN, "Invalid token payload")


class AuthGateRejection(Exception):
    """Raised by the gate dependency so the request stops before its handler."""

    def __init__(self, failure: Failure):
        super().__init__(failure.message)
        self.failure = failure


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


async def require_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
) -> TokenClaims:
    """
    Dependency guarding protected routes.

    Rejects requests without a bearer token (401) or with a token the
    Token Service does not accept (403). On success the claims are stored on
    ``request.state.identity`` and returned to the handler.
    """
    if credentials is None or not credentials.credentials:
        record_auth_event("token", "missing")
        raise AuthGateRejection(
            Failure(ErrorKind.UNAUTHENTICATED, "Access denied, token not provided")
        )

    result = tokens.verify(credentials.credentials)
    if isinstance(result, Failure):
        record_auth_event("token", "rejected")
        logger.info("Rejected bearer token: %s", result.message)
        raise AuthGateRejection(Failure(ErrorKind.FORBIDDEN, result.message))

    record_auth_event("token", "accepted")
    request.state.identity = result.value
    user_id_ctx.set(result.value.user_id)
    return result.value


__all__ = [
    "AuthGateRejection",
    "MAX_PASSWORD_BYTES",
    "PasswordHasher",
    "TokenClaims",
    "TokenService",
    "TokenSettings",
    "bearer_scheme",
    "get_password_hasher",
    "get_token_service",
    "require_identity",
]
