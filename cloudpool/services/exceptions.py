# cloudpool/services/exceptions.py
from typing import Dict, List

# --- Not Found Exceptions ---
class NotFoundError(Exception):
    """A referenced record does not exist"""
    pass

class PoolNotFoundError(NotFoundError):
    pass

class PoolFamilyNotFoundError(NotFoundError):
    pass

class QuotaNotFoundError(NotFoundError):
    pass

class UserNotFoundError(NotFoundError):
    pass

class RoleNotFoundError(NotFoundError):
    pass

# --- Write Exceptions ---
class ValidationError(Exception):
    """
    Attribute constraints (presence, uniqueness, format, length) were violated.
    Nothing was written.

    Attributes:
        errors: attribute name -> list of messages.
    """
    def __init__(self, errors: Dict[str, List[str]]):
        self.errors = errors
        messages = [f"{field} {message}" for field, field_errors in errors.items() for message in field_errors]
        super().__init__("Validation failed: " + ", ".join(messages))

class DestroyBlockedError(Exception):
    """The pool still owns instances that cannot be destroyed"""
    pass
