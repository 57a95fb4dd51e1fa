from fastapi import status


class ServiceError(Exception):
    """Base for failures the API reports with a specific status code.

    ``extra`` keyword arguments are merged into the JSON error body next to
    ``ok`` and ``message``.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, **extra):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_dict(self) -> dict:
        return {"ok": False, "message": self.message, **self.extra}


class ValidationFailed(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationFailed(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED


class CapacityReached(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND


class Conflict(ServiceError):
    status_code = status.HTTP_409_CONFLICT


class TooManyRequests(ServiceError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
