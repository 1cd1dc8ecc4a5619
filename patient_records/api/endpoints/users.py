"""
User account endpoints: listing, profile CRUD, registration, and login.
"""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from patient_records.api.deps import get_account_directory
from patient_records.api.responses import failure, success
from patient_records.core.config import settings
from patient_records.core.rate_limiter import limiter
from patient_records.core.results import Failure
from patient_records.schemas.accounts import (
    AccountUpdate,
    LoginRequest,
    LoginResult,
    RegistrationRequest,
    RegistrationResult,
)
from patient_records.services.accounts import AccountDirectory

router = APIRouter()


@router.get("")
async def list_users(directory: AccountDirectory = Depends(get_account_directory)) -> JSONResponse:
    """List all users without credential data."""
    result = await directory.list_accounts()
    if isinstance(result, Failure):
        return failure(result)
    return success("Fetched user list.", result.value)


@router.post("/register", status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.AUTH_RATE_LIMIT)
async def register_user(
    request: Request,
    payload: RegistrationRequest,
    directory: AccountDirectory = Depends(get_account_directory),
) -> JSONResponse:
    """
    Register a new user.

    Payload is validated before this handler runs; a taken username or email
    is reported as a 400 failure.
    """
    result = await directory.register(payload)
    if isinstance(result, Failure):
        return failure(result)
    return success(
        "User created.",
        RegistrationResult(user_id=result.value),
        status_code=status.HTTP_201_CREATED,
    )


@router.post("/login")
@limiter.limit(settings.AUTH_RATE_LIMIT)
async def login(
    request: Request,
    credentials: LoginRequest,
    directory: AccountDirectory = Depends(get_account_directory),
) -> JSONResponse:
    """Authenticate and return a bearer token valid for one hour."""
    result = await directory.authenticate(credentials)
    if isinstance(result, Failure):
        return failure(result)
    return success("Login successful.", LoginResult(token=result.value))


@router.get("/{user_id}")
async def get_user(
    user_id: str,
    directory: AccountDirectory = Depends(get_account_directory),
) -> JSONResponse:
    result = await directory.get_account(user_id)
    if isinstance(result, Failure):
        return failure(result)
    return success("Fetched user.", result.value)


@router.put("/{user_id}")
async def update_user(
    user_id: str,
    update: AccountUpdate,
    directory: AccountDirectory = Depends(get_account_directory),
) -> JSONResponse:
    """Update any subset of username, email, password, and full name."""
    result = await directory.update_account(user_id, update)
    if isinstance(result, Failure):
        return failure(result)
    return success("User updated.")


@router.delete("/{user_id}")
async def delete_user(
    user_id: str,
    directory: AccountDirectory = Depends(get_account_directory),
) -> JSONResponse:
    result = await directory.delete_account(user_id)
    if isinstance(result, Failure):
        return failure(result)
    return success("User deleted.")
