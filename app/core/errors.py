"""
Store locator exception hierarchy.

Services raise these; ``app.main`` turns them into JSON responses with the
status code declared on each class.
"""


class StoreLocatorError(Exception):
    """Base exception for all store locator errors."""

    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
        self.message = message


class UnauthenticatedError(StoreLocatorError):
    """No identity could be resolved for the request."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class ForbiddenError(StoreLocatorError):
    """Identity resolved but lacks membership or role."""

    status_code = 403

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message)


class NotFoundError(StoreLocatorError):
    status_code = 404


class ConflictError(StoreLocatorError):
    status_code = 409


class InvalidInputError(StoreLocatorError):
    status_code = 400


class LastOwnerError(InvalidInputError):
    """Raised when a change would leave a brand without an owner."""

    def __init__(self, message: str = "Cannot remove the last owner of the brand"):
        super().__init__(message)
