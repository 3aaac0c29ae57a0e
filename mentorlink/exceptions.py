# mentorlink/exceptions.py
from enum import Enum

class ErrorKind(str, Enum):
    VALIDATION = "VALIDATION"
    NOT_FOUND = "NOT_FOUND"
    INVALID_STATE = "INVALID_STATE"
    DEPENDENCY = "DEPENDENCY"
    INTEGRITY = "INTEGRITY"

class BusinessLogicError(Exception):
    """Base exception for business logic errors.

    Subclasses carry an ``ErrorKind`` and the HTTP status it maps to, so callers
    can branch on the kind of failure instead of the message text.
    """
    kind: ErrorKind = ErrorKind.VALIDATION
    status_code: int = 400

class ValidationError(BusinessLogicError):
    """Raised when input is missing or malformed"""
    kind = ErrorKind.VALIDATION
    status_code = 400

class NotFoundError(BusinessLogicError):
    """Raised when a resource is not found"""
    kind = ErrorKind.NOT_FOUND
    status_code = 404

class InvalidStateError(BusinessLogicError):
    """Raised when an illegal lifecycle transition is attempted"""
    kind = ErrorKind.INVALID_STATE
    status_code = 409

class DependencyError(BusinessLogicError):
    """Raised when the store, directory or notification gateway fails"""
    kind = ErrorKind.DEPENDENCY
    status_code = 503

class DataIntegrityError(BusinessLogicError):
    """Raised when stored references contradict each other"""
    kind = ErrorKind.INTEGRITY
    status_code = 500
