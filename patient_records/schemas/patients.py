"""Pydantic schemas for patient records."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

PatientName = Annotated[str, Field(min_length=1, max_length=255)]
Age = Annotated[int, Field(ge=0, le=150)]


class PatientCreate(BaseModel):
    name: PatientName
    age: Optional[Age] = None
    gender: Optional[str] = Field(default=None, max_length=20)
    address: Optional[str] = None


class PatientUpdate(BaseModel):
    name: Optional[PatientName] = None
    age: Optional[Age] = None
    gender: Optional[str] = Field(default=None, max_length=20)
    address: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def reject_null_name(cls, v):
        if v is None:
            raise PydanticCustomError("null_not_allowed", "value must not be null")
        return v

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class PatientResponse(BaseModel):
    patient_id: str
    name: str
    age: Optional[int]
    gender: Optional[str]
    address: Optional[str]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PatientCreated(BaseModel):
    patient_id: str
