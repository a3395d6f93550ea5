from enum import Enum


class UserRole(str, Enum):
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


class PunchAction(str, Enum):
    CHECK_IN = "punch_in"
    CHECK_OUT = "punch_out"


class AttendanceState(str, Enum):
    """Per-employee state derived from the latest ledger entry."""

    CHECKED_OUT = "checked_out"
    CHECKED_IN = "checked_in"


class TransitionRejection(str, Enum):
    ALREADY_CHECKED_IN = "already_checked_in"
    NOT_CHECKED_IN = "not_checked_in"


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
