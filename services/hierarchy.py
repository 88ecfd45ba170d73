from core.logger import logger
from database.repositories.employee_repo import EmployeeRepo
from domain.entities import Employee, HierarchicalEmployee
from domain.errors import EmployeeNotFoundError


class HierarchyBuilder:
    """Builds the org chart below an employee from the flat employees table.

    Precondition: the manager graph is acyclic. The recursion has no depth
    limit, so a cycle written around EmployeeService (e.g. by hand in SQL)
    makes it recurse until RecursionError.
    """

    def __init__(self, repo: EmployeeRepo):
        self.repo = repo

    async def build_hierarchy(self, employee_id: int) -> HierarchicalEmployee:
        employee = await self.repo.get(employee_id)
        if employee is None:
            raise EmployeeNotFoundError(employee_id)

        tree = await self._build_tree(employee)
        logger.info(
            f'Hierarchy built for ID={employee_id} '
            f'({tree.total_subordinates_count} subordinates)'
        )
        return tree

    async def _build_tree(self, employee: Employee) -> HierarchicalEmployee:
        direct_reports = await self.repo.find_by_manager(employee.id)

        subordinates = []
        for report in direct_reports:
            subordinates.append(await self._build_tree(report))

        return HierarchicalEmployee.from_employee(employee, tuple(subordinates))
