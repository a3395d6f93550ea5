from typing import Any, Dict, Union

from fastapi import status

from parlour.core.enums import TransitionRejection


class ServiceError(Exception):
    """Base exception for service layer errors."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @property
    def detail(self) -> Union[str, Dict[str, Any]]:
        """Body of the HTTP error response built from this exception."""
        return self.message


class ValidationError(ServiceError):
    def __init__(self, message: str) -> None:
        super().__init__(message, status.HTTP_400_BAD_REQUEST)


class NotFoundError(ServiceError):
    def __init__(self, message: str) -> None:
        super().__init__(message, status.HTTP_404_NOT_FOUND)


class ConflictError(ServiceError):
    def __init__(self, message: str) -> None:
        super().__init__(message, status.HTTP_409_CONFLICT)


class AuthenticationError(ServiceError):
    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message, status.HTTP_401_UNAUTHORIZED)


class IllegalTransitionError(ServiceError):
    """Punch action does not match the employee's current derived state."""

    MESSAGES = {
        TransitionRejection.ALREADY_CHECKED_IN: "Employee is already checked in",
        TransitionRejection.NOT_CHECKED_IN: "Employee must be checked in before checking out",
    }

    def __init__(self, reason: TransitionRejection) -> None:
        super().__init__(self.MESSAGES[reason], status.HTTP_400_BAD_REQUEST)
        self.reason = reason

    @property
    def detail(self) -> Dict[str, Any]:
        return {"message": self.message, "code": self.reason.value}


class StorageFailureError(ServiceError):
    """Persistence failed (connectivity, constraint violation). Never recovered locally."""

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR)
