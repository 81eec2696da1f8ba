"""
Exceptions raised by the service layer

The API maps each class to an HTTP status code; services never build HTTP
responses themselves.
"""


class FlickxirError(Exception):
    """Base class for storefront errors"""

    status_code = 500

    def __init__(self, message: str, errors: list = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []


class ValidationError(FlickxirError):
    """Submitted data failed a form or business rule"""

    status_code = 400


class AuthenticationError(FlickxirError):
    status_code = 401


class PermissionDeniedError(FlickxirError):
    status_code = 403


class NotFoundError(FlickxirError):
    status_code = 404

    def __init__(self, resource: str, resource_id=None):
        message = f"{resource} not found" if resource_id is None else f"{resource} {resource_id} not found"
        super().__init__(message)
        self.resource = resource
        self.resource_id = resource_id


class ConflictError(FlickxirError):
    status_code = 409


class StorageError(FlickxirError):
    """Object storage call failed"""

    status_code = 502
