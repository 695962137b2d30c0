class RoomieRulesException(Exception):
    """Base exception for RoomieRules"""

    pass


class UnauthorizedException(RoomieRulesException):
    """Raised when the bearer token is missing, invalid or expired"""

    pass


class NotFoundException(RoomieRulesException):
    """Raised when resource not found"""

    pass


class ForbiddenException(RoomieRulesException):
    """Raised when the caller's role or ownership does not allow the action"""

    pass


class ValidationException(RoomieRulesException):
    """Raised for business logic validation errors"""

    pass


class InternalException(RoomieRulesException):
    """Raised when the database or the filesystem fails underneath an operation"""

    pass
