from typing import Optional

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimeStampMixin


class Employee(TimeStampMixin, Base):
    __tablename__ = 'employees'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    position: Mapped[str] = mapped_column(String(200), nullable=False)

    # Self-referential FK. RESTRICT keeps a manager with reports from being deleted
    manager_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey('employees.id', ondelete='RESTRICT'),
        nullable=True,
        index=True,
    )

    manager: Mapped[Optional['Employee']] = relationship(
        back_populates='direct_reports',
        remote_side='Employee.id',
        lazy='raise',
    )

    direct_reports: Mapped[list['Employee']] = relationship(
        back_populates='manager',
        passive_deletes='all',
        lazy='raise',
    )
