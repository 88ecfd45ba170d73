from typing import Any

from sqlalchemy import delete as sql_delete, exists, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.logger import logger
from domain.entities import Employee

from ..mappers import EmployeeMapper
from ..models import Employee as EmployeeORM

UPDATABLE_FIELDS = frozenset({'name', 'position', 'manager_id'})


class EmployeeRepo:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def save(self, employee: Employee) -> Employee:
        try:
            orm_employee = EmployeeMapper.to_orm(employee)
            self.session.add(orm_employee)
            await self.session.flush()
            # Load server-side timestamps
            await self.session.refresh(orm_employee)

            saved = EmployeeMapper.to_domain(orm_employee)
            logger.info(f'Employee saved. ID={saved.id}')
            return saved

        except SQLAlchemyError as e:
            logger.error(f'Database error while saving employee: {e}')
            raise

    async def get(self, id: int, lock: bool = False) -> Employee | None:
        try:
            stmt = select(EmployeeORM).where(EmployeeORM.id == id)
            if lock:
                stmt = stmt.with_for_update()
            result = await self.session.execute(stmt)
            orm_employee = result.scalars().first()

            if not orm_employee:
                return None

            return EmployeeMapper.to_domain(orm_employee)

        except SQLAlchemyError as e:
            logger.error(f'Database error while fetching employee ID={id}: {e}')
            raise

    async def find_by_manager(self, manager_id: int) -> list[Employee]:
        """Direct reports of `manager_id`, ordered by id."""
        try:
            stmt = (
                select(EmployeeORM)
                .where(EmployeeORM.manager_id == manager_id)
                .order_by(EmployeeORM.id)
            )
            result = await self.session.execute(stmt)
            return [EmployeeMapper.to_domain(e) for e in result.scalars().all()]

        except SQLAlchemyError as e:
            logger.error(f'Database error while fetching reports of ID={manager_id}: {e}')
            raise

    async def find_report_ids(self, manager_id: int) -> list[int]:
        result = await self.session.execute(
            select(EmployeeORM.id).where(EmployeeORM.manager_id == manager_id)
        )
        return list(result.scalars().all())

    async def has_direct_reports(self, id: int) -> bool:
        result = await self.session.execute(
            select(exists().where(EmployeeORM.manager_id == id))
        )
        return bool(result.scalar())

    async def update_fields(self, id: int, fields: dict[str, Any]) -> Employee | None:
        """Apply all `fields` to the row in a single flush."""
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f'Fields cannot be updated: {sorted(unknown)}')

        try:
            stmt = select(EmployeeORM).where(EmployeeORM.id == id)
            result = await self.session.execute(stmt)
            orm_employee = result.scalars().first()

            if not orm_employee:
                logger.error(f'Employee ID={id} not found for update')
                return None

            for key, value in fields.items():
                setattr(orm_employee, key, value)
            await self.session.flush()
            await self.session.refresh(orm_employee)

            logger.info(f'Employee updated. ID={orm_employee.id}')
            return EmployeeMapper.to_domain(orm_employee)

        except SQLAlchemyError as e:
            logger.error(f'Database error while updating employee ID={id}: {e}')
            raise

    async def delete(self, id: int) -> bool:
        """Delete the row. Returns False if there was nothing to delete."""
        try:
            result = await self.session.execute(
                sql_delete(EmployeeORM).where(EmployeeORM.id == id)
            )
            await self.session.flush()

            if result.rowcount == 0:
                logger.warning(f'Employee ID={id} not found on delete')
                return False

            logger.info(f'Employee deleted. ID={id}')
            return True

        except SQLAlchemyError as e:
            logger.error(f'Database error while deleting employee ID={id}: {e}')
            raise
