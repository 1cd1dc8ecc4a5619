"""
Patient record endpoints. Every route requires a valid bearer token.
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from patient_records.api.deps import get_patient_registry
from patient_records.api.responses import failure, success
from patient_records.core.results import Failure
from patient_records.core.security import require_identity
from patient_records.schemas.patients import PatientCreate, PatientCreated, PatientUpdate
from patient_records.services.patients import PatientRegistry

router = APIRouter(dependencies=[Depends(require_identity)])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_patient(
    payload: PatientCreate,
    registry: PatientRegistry = Depends(get_patient_registry),
) -> JSONResponse:
    result = await registry.create(payload)
    if isinstance(result, Failure):
        return failure(result)
    return success(
        "Patient added.",
        PatientCreated(patient_id=result.value),
        status_code=status.HTTP_201_CREATED,
    )


@router.get("")
async def list_patients(registry: PatientRegistry = Depends(get_patient_registry)) -> JSONResponse:
    result = await registry.list_patients()
    if isinstance(result, Failure):
        return failure(result)
    return success("Fetched patient list.", result.value)


@router.get("/{patient_id}")
async def get_patient(
    patient_id: str,
    registry: PatientRegistry = Depends(get_patient_registry),
) -> JSONResponse:
    result = await registry.get(patient_id)
    if isinstance(result, Failure):
        return failure(result)
    return success("Fetched patient.", result.value)


@router.put("/{patient_id}")
async def update_patient(
    patient_id: str,
    update: PatientUpdate,
    registry: PatientRegistry = Depends(get_patient_registry),
) -> JSONResponse:
    result = await registry.update(patient_id, update)
    if isinstance(result, Failure):
        return failure(result)
    return success("Patient updated.")


@router.delete("/{patient_id}")
async def delete_patient(
    patient_id: str,
    registry: PatientRegistry = Depends(get_patient_registry),
) -> JSONResponse:
    result = await registry.delete(patient_id)
    if isinstance(result, Failure):
        return failure(result)
    return success("Patient deleted.")
