"""
API router - aggregates all endpoint routers.
"""

from fastapi import APIRouter

from patient_records.api.endpoints import health_router, patients_router, users_router

api_router = APIRouter()

api_router.include_router(health_router, prefix="/health", tags=["health"])
api_router.include_router(users_router, prefix="/users", tags=["users"])
api_router.include_router(patients_router, prefix="/patients", tags=["patients"])
