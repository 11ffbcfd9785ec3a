from fastapi import HTTPException, status


class RentalError(Exception):
    """Base class for booking errors. The message is shown to the end user as-is."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class RentalValidationError(RentalError):
    """Missing or malformed field, invalid enum value, or an inverted date range."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class AuthenticationError(RentalError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class AuthorizationError(RentalError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Unauthorized: Access Denied"


class NotFoundError(RentalError):
    """Referenced user, vehicle or order does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(RentalError):
    """Booking overlap, or a duplicate unique field such as slug, license plate or email."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class InternalError(RentalError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"


class AppException:
    """Class-based exception handlers for common HTTP status codes."""

    @staticmethod
    def raise_401(message: str = "Unauthorized"):
        """Raise a 401 Unauthorized exception."""
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=message)

    @staticmethod
    def raise_404(message: str = "Not Found"):
        """Raise a 404 Not Found exception."""
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=message)
