from collections import deque

from database.repositories.employee_repo import EmployeeRepo


class CycleGuard:
    """Rejects manager reassignments that would turn the forest into a graph with a loop.

    Each check walks the whole subtree under the employee, so it costs
    O(subtree size) queries. Results are not cached; a cached descendant set
    could go stale between the check and the write.
    """

    def __init__(self, repo: EmployeeRepo):
        self.repo = repo

    async def collect_descendant_ids(self, employee_id: int) -> list[int]:
        """BFS over direct-report edges. The employee itself is not included."""
        descendants: list[int] = []
        seen = {employee_id}
        queue = deque([employee_id])
        while queue:
            current_id = queue.popleft()
            for report_id in await self.repo.find_report_ids(current_id):
                # Guard against an already corrupted graph
                if report_id in seen:
                    continue
                seen.add(report_id)
                descendants.append(report_id)
                queue.append(report_id)
        return descendants

    async def would_create_cycle(self, employee_id: int, proposed_manager_id: int) -> bool:
        if employee_id == proposed_manager_id:
            return True
        return proposed_manager_id in await self.collect_descendant_ids(employee_id)
