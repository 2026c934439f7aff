"""Service layer error taxonomy"""
from typing import Optional


class DomainValidationError(Exception):
    """Client-side fault detected before any store mutation"""
    def __init__(self, message: str, code: str = "VALIDATION_FAILED", field: Optional[str] = None):
        self.message = message
        self.code = code
        self.field = field
        super().__init__(message)


class NotFoundError(Exception):
    """Referenced user, video or comment does not exist"""
    def __init__(self, resource: str, resource_id, code: str = "NOT_FOUND"):
        self.resource = resource
        self.resource_id = resource_id
        self.message = f"{resource.capitalize()} not found: {resource_id}"
        self.code = code
        super().__init__(self.message)


class StoreError(Exception):
    """Storage fault (connectivity, constraint violation); never retried here"""
    def __init__(self, message: str, code: str = "STORE_UNAVAILABLE"):
        self.message = message
        self.code = code
        super().__init__(message)
