from parlour.core.models.employee import Employee
from parlour.core.models.attendance import AttendanceEvent
from parlour.core.models.task import Task

__all__ = [
    "AttendanceEvent",
    "Employee",
    "Task",
]
