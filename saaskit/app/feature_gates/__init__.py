"""Gates deciding whether a caller may attempt an operation."""
from .enforcement import require_admin, require_permission, require_principal
from .exceptions import (
    AccessDeniedError,
    ActionNotAvailableError,
    AdminAccessRequiredError,
    AuthenticationRequiredError,
)

__all__ = [
    "AccessDeniedError",
    "ActionNotAvailableError",
    "AdminAccessRequiredError",
    "AuthenticationRequiredError",
    "require_admin",
    "require_permission",
    "require_principal",
]
