from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

T = TypeVar('T')


# ============ Envelope ============

class CommonResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str
    data: T | None = None


# ============ Employee ============

class EmployeeCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    position: str = Field(..., min_length=1, max_length=200)
    manager_id: int | None = Field(default=None, gt=0)

    @field_validator('name', 'position')
    @classmethod
    def strip_fields(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError('Field must not be blank')
        return v


class EmployeeUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    position: str | None = Field(default=None, min_length=1, max_length=200)
    # Explicit null moves the employee to the top of a reporting chain
    manager_id: int | None = Field(default=None, gt=0)

    @field_validator('name', 'position')
    @classmethod
    def strip_fields(cls, v: str | None) -> str | None:
        if v is not None:
            v = v.strip()
            if not v:
                raise ValueError('Field must not be blank')
        return v

    def changes(self) -> dict:
        """Only the fields present in the request body. name/position cannot be nulled."""
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None or key == 'manager_id'
        }


class EmployeeResponse(BaseModel):
    id: int
    name: str
    position: str
    manager_id: int | None
    created_at: datetime | None
    updated_at: datetime | None

    model_config = ConfigDict(from_attributes=True)


class HierarchicalEmployeeResponse(EmployeeResponse):
    subordinates: list['HierarchicalEmployeeResponse'] = []
    total_subordinates_count: int = 0


HierarchicalEmployeeResponse.model_rebuild()


class SubordinatesResponse(BaseModel):
    employee: HierarchicalEmployeeResponse
    message: str | None = None
