"""
Pytest configuration and fixtures.
"""
from datetime import timedelta
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from patient_records.core.security import PasswordHasher, TokenService, TokenSettings
from patient_records.services.accounts import AccountDirectory
from tests.fakes import InMemoryAccountRepository, InMemoryPatientRepository

TEST_SECRET = "unit-test-signing-secret-0123456789abcdef"


@pytest.fixture
def hasher() -> PasswordHasher:
    """Minimum bcrypt cost keeps the suite fast."""
    return PasswordHasher(rounds=4)


@pytest.fixture
def token_service() -> TokenService:
    return TokenService(TokenSettings(secret=TEST_SECRET, lifetime=timedelta(hours=1)))


@pytest.fixture
def account_repository() -> InMemoryAccountRepository:
    return InMemoryAccountRepository()


@pytest.fixture
def patient_repository() -> InMemoryPatientRepository:
    return InMemoryPatientRepository()


@pytest.fixture
def directory(account_repository, hasher, token_service) -> AccountDirectory:
    return AccountDirectory(account_repository, hasher, token_service)


@pytest_asyncio.fixture
async def api_client(
    monkeypatch, hasher, token_service, account_repository, patient_repository
) -> AsyncGenerator[AsyncClient, None]:
    """HTTPX AsyncClient configured against the FastAPI app with test overrides."""
    from patient_records.main import app
    from patient_records.api.deps import get_account_repository, get_patient_repository
    from patient_records.core.rate_limiter import limiter

    monkeypatch.setattr(app.state, "password_hasher", hasher)
    monkeypatch.setattr(app.state, "token_service", token_service)
    limiter.reset()

    app.dependency_overrides[get_account_repository] = lambda: account_repository
    app.dependency_overrides[get_patient_repository] = lambda: patient_repository

    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://testserver") as client:
            yield client
    finally:
        app.dependency_overrides.pop(get_account_repository, None)
        app.dependency_overrides.pop(get_patient_repository, None)
        limiter.reset()


@pytest.fixture
def auth_headers(token_service):
    """Bearer header for a token signed with the test secret."""
    from patient_records.core.security import TokenClaims

    token = token_service.issue(TokenClaims(user_id="user-1", username="alice_01"))
    return {"Authorization": f"Bearer {token}"}
