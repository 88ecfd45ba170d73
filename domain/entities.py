from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Employee:
    """Employee"""

    name: str
    position: str
    manager_id: int | None = None
    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class HierarchicalEmployee:
    """Employee with its expanded subtree of direct and indirect reports.

    Read-time projection only, rebuilt on every query and never stored.
    """

    id: int
    name: str
    position: str
    manager_id: int | None
    created_at: datetime | None
    updated_at: datetime | None
    subordinates: tuple[HierarchicalEmployee, ...] = field(default_factory=tuple)
    total_subordinates_count: int = 0

    @classmethod
    def from_employee(
        cls,
        employee: Employee,
        subordinates: tuple[HierarchicalEmployee, ...] = (),
    ) -> HierarchicalEmployee:
        return cls(
            id=employee.id,
            name=employee.name,
            position=employee.position,
            manager_id=employee.manager_id,
            created_at=employee.created_at,
            updated_at=employee.updated_at,
            subordinates=subordinates,
            total_subordinates_count=sum(1 + s.total_subordinates_count for s in subordinates),
        )


@dataclass(frozen=True)
class SubordinatesView:
    """Result of a subordinates lookup: the tree plus an optional note."""

    employee: HierarchicalEmployee
    note: str | None = None
