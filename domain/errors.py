class EmployeeNotFoundError(LookupError):
    def __init__(self, employee_id: int):
        self.employee_id = employee_id
        super().__init__(f'Employee ID={employee_id} not found')
