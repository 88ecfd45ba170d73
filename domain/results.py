from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar('T')

INTERNAL_SERVER_ERROR = 'Internal server error'


class ErrorKind(str, Enum):
    NOT_FOUND = 'not_found'
    SELF_MANAGEMENT = 'self_management'
    CIRCULAR_HIERARCHY = 'circular_hierarchy'
    HAS_SUBORDINATES = 'has_subordinates'
    STORAGE_CONFLICT = 'storage_conflict'
    STORAGE_FAILURE = 'storage_failure'


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    """Tagged outcome of a service operation.

    `error` is None exactly when `success` is True. `message` is always safe to
    show to the end user.
    """

    success: bool
    message: str
    data: T | None = None
    error: ErrorKind | None = None

    @classmethod
    def ok(cls, message: str, data: T | None = None) -> ServiceResult[T]:
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, error: ErrorKind, message: str) -> ServiceResult[T]:
        return cls(success=False, message=message, error=error)
