"""Custom exceptions raised when a gate denies an operation."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from fastapi import HTTPException, status


@dataclass
class AccessDeniedError(Exception):
    """Represents an actionable denial surfaced to API callers."""

    code: str
    message: str
    status_code: int = status.HTTP_403_FORBIDDEN
    detail: Optional[Mapping[str, Any]] = None

    def __post_init__(self) -> None:
        base_detail: Dict[str, Any] = {"error": self.code, "message": self.message}
        if self.detail:
            base_detail.update(self.detail)
        object.__setattr__(self, "_payload", base_detail)
        super().__init__(self.message)

    @property
    def payload(self) -> Mapping[str, Any]:
        """Serialized representation suitable for JSON responses."""

        return self._payload

    def to_http_exception(self) -> HTTPException:
        """Convert the domain error into a FastAPI HTTPException."""

        return HTTPException(status_code=self.status_code, detail=dict(self.payload))


class AuthenticationRequiredError(AccessDeniedError):
    """No session is present; the caller must sign in."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(
            code="authentication_required",
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
        )


class AdminAccessRequiredError(AccessDeniedError):
    """A session is present but its role does not grant admin access."""

    def __init__(self, role: Optional[str] = None, message: str = "Admin access required") -> None:
        super().__init__(
            code="admin_access_required",
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"role": role} if role else None,
        )


class ActionNotAvailableError(AccessDeniedError):
    """The subscription is not in a state that allows the requested action."""

    def __init__(self, message: str, detail: Optional[Mapping[str, Any]] = None) -> None:
        super().__init__(
            code="action_not_available",
            message=message,
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
        )

    @classmethod
    def for_action(cls, action: str, subscription_status: str, target_plan=None) -> "ActionNotAvailableError":
        detail: Dict[str, Any] = {"action": action, "status": subscription_status}
        if target_plan is not None:
            detail["target_plan"] = getattr(target_plan, "value", target_plan)
        if subscription_status == "none":
            message = f"Cannot {action.replace('_', ' ')} without a subscription."
        else:
            message = (
                f"Cannot {action.replace('_', ' ')} while the subscription is "
                f"{subscription_status.replace('_', ' ')}."
            )
        return cls(message, detail)
