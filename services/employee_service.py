from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.logger import logger
from database.repositories.employee_repo import EmployeeRepo
from domain.entities import Employee, SubordinatesView
from domain.errors import EmployeeNotFoundError
from domain.results import INTERNAL_SERVER_ERROR, ErrorKind, ServiceResult

from .cycle_guard import CycleGuard
from .hierarchy import HierarchyBuilder

EMPLOYEE_NOT_FOUND = 'Employee not found'
MANAGER_NOT_FOUND = 'Manager not found'
SELF_MANAGEMENT = 'Employee cannot be their own manager'
CIRCULAR_HIERARCHY = 'Cannot assign a subordinate as manager (circular hierarchy)'
HAS_SUBORDINATES = 'Cannot delete employee with subordinates. Please reassign subordinates first.'
STORAGE_CONFLICT = 'Employee conflicts with existing data'
NO_SUBORDINATES = 'This employee has no subordinates'


class EmployeeService:
    """Create, edit and remove employees without breaking the reporting forest.

    Every public method returns a ServiceResult. Expected failures (missing
    employee, self-management, cycles, blocked deletes) come back as failed
    results; database errors are logged, the session is rolled back and a
    generic message is returned.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = EmployeeRepo(session)
        self.cycle_guard = CycleGuard(self.repo)
        self.hierarchy = HierarchyBuilder(self.repo)

    async def create(
        self,
        name: str,
        position: str,
        manager_id: int | None = None,
    ) -> ServiceResult[Employee]:
        try:
            if manager_id is not None and await self.repo.get(manager_id) is None:
                logger.warning(f'Create rejected: manager ID={manager_id} not found')
                return ServiceResult.fail(ErrorKind.NOT_FOUND, MANAGER_NOT_FOUND)

            saved = await self.repo.save(
                Employee(name=name, position=position, manager_id=manager_id)
            )
            logger.info(f'Employee created. ID={saved.id}, name={saved.name!r}, position={saved.position!r}')
            return ServiceResult.ok('Employee created successfully', saved)

        except SQLAlchemyError as e:
            return await self._storage_error(e, 'Error creating employee')

    async def find_one(self, employee_id: int) -> ServiceResult[Employee]:
        try:
            employee = await self.repo.get(employee_id)
            if employee is None:
                logger.warning(f'Employee ID={employee_id} not found')
                return ServiceResult.fail(ErrorKind.NOT_FOUND, EMPLOYEE_NOT_FOUND)
            return ServiceResult.ok('Employee fetched successfully', employee)

        except SQLAlchemyError as e:
            return await self._storage_error(e, f'Error fetching employee ID={employee_id}')

    async def update(self, employee_id: int, changes: dict[str, Any]) -> ServiceResult[Employee]:
        """Apply `changes` (only the fields the caller sent).

        A non-null `manager_id` is checked for self-management, existence and
        cycles before anything is written. An explicit None makes the
        employee a root.
        """
        try:
            # Row lock keeps the cycle check and the write in one transaction
            employee = await self.repo.get(employee_id, lock=True)
            if employee is None:
                logger.warning(f'Update rejected: employee ID={employee_id} not found')
                return ServiceResult.fail(ErrorKind.NOT_FOUND, EMPLOYEE_NOT_FOUND)

            manager_id = changes.get('manager_id')
            if manager_id is not None:
                if manager_id == employee_id:
                    return ServiceResult.fail(ErrorKind.SELF_MANAGEMENT, SELF_MANAGEMENT)

                if await self.repo.get(manager_id) is None:
                    logger.warning(f'Update rejected: manager ID={manager_id} not found')
                    return ServiceResult.fail(ErrorKind.NOT_FOUND, MANAGER_NOT_FOUND)

                if await self.cycle_guard.would_create_cycle(employee_id, manager_id):
                    logger.warning(
                        f'Update rejected: ID={manager_id} is a subordinate of ID={employee_id}'
                    )
                    return ServiceResult.fail(ErrorKind.CIRCULAR_HIERARCHY, CIRCULAR_HIERARCHY)

            if not changes:
                return ServiceResult.ok('Employee updated successfully', employee)

            updated = await self.repo.update_fields(employee_id, changes)
            if updated is None:
                return ServiceResult.fail(ErrorKind.NOT_FOUND, EMPLOYEE_NOT_FOUND)

            logger.info(f'Employee updated. ID={employee_id}, changes={changes}')
            return ServiceResult.ok('Employee updated successfully', updated)

        except SQLAlchemyError as e:
            return await self._storage_error(e, f'Error updating employee ID={employee_id}')

    async def remove(self, employee_id: int) -> ServiceResult[None]:
        try:
            employee = await self.repo.get(employee_id, lock=True)
            if employee is None:
                logger.warning(f'Delete rejected: employee ID={employee_id} not found')
                return ServiceResult.fail(ErrorKind.NOT_FOUND, EMPLOYEE_NOT_FOUND)

            if await self.repo.has_direct_reports(employee_id):
                logger.warning(f'Delete rejected: employee ID={employee_id} has subordinates')
                return ServiceResult.fail(ErrorKind.HAS_SUBORDINATES, HAS_SUBORDINATES)

            if not await self.repo.delete(employee_id):
                return ServiceResult.fail(ErrorKind.NOT_FOUND, EMPLOYEE_NOT_FOUND)

            return ServiceResult.ok('Employee deleted successfully')

        except SQLAlchemyError as e:
            return await self._storage_error(e, f'Error deleting employee ID={employee_id}')

    async def find_all_subordinates(self, employee_id: int) -> ServiceResult[SubordinatesView]:
        try:
            tree = await self.hierarchy.build_hierarchy(employee_id)
        except EmployeeNotFoundError:
            logger.warning(f'Subordinates requested for unknown employee ID={employee_id}')
            return ServiceResult.fail(ErrorKind.NOT_FOUND, EMPLOYEE_NOT_FOUND)
        except SQLAlchemyError as e:
            return await self._storage_error(e, f'Error fetching subordinates of ID={employee_id}')

        note = NO_SUBORDINATES if not tree.subordinates else None
        return ServiceResult.ok('Subordinates fetched successfully', SubordinatesView(tree, note))

    async def _storage_error(self, error: SQLAlchemyError, context: str) -> ServiceResult:
        await self.session.rollback()

        if isinstance(error, IntegrityError):
            logger.error(f'{context}: integrity violation: {error.orig}')
            return ServiceResult.fail(ErrorKind.STORAGE_CONFLICT, STORAGE_CONFLICT)

        logger.exception(f'{context}: {error}')
        return ServiceResult.fail(ErrorKind.STORAGE_FAILURE, INTERNAL_SERVER_ERROR)
