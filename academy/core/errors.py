"""
Error taxonomy for the portal.

Every error is an ``HTTPException`` so FastAPI renders it as
``{"detail": message}`` with the matching status code. Login-time errors keep
their specific message; request-time authorization errors only name the
category.
"""
from fastapi import HTTPException, status


class AcademyError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error"

    def __init__(self, detail: str | None = None, headers: dict[str, str] | None = None):
        super().__init__(
            status_code=type(self).status_code,
            detail=detail or self.default_detail,
            headers=headers,
        )


# Login-time failures (checked in this order by the authenticator)


class InvalidCredentials(AcademyError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid email or password"


class AccountInactive(AcademyError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Account is inactive. Please contact administrator."


class NoPermissionsAssigned(AcademyError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Access denied - no permissions assigned"


class AccessExpired(AcademyError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Access expired. Please contact administrator to renew."


# Role switching


class InvalidRole(AcademyError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid role"


class RoleNotGranted(AcademyError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "User does not have the requested role"


# Request-time authorization


class Unauthorized(AcademyError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Not authenticated"

    def __init__(self, detail: str | None = None):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(AcademyError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Forbidden"


class NotFound(AcademyError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class InvalidOperation(AcademyError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid operation"


class ValidationError(AcademyError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request"


class InternalError(AcademyError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error"
