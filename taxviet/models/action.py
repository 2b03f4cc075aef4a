"""
Boundary Result Model

Every operation of the TaxAssistant facade returns an ActionResult.
The UI shows `message` as a transient notification and reads `value`
on success.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class NotificationKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class ActionResult(BaseModel):
    """Success value or typed failure, with a message for the user."""
    
    ok: bool
    message: str = Field(default="", description="Localized notification text")
    error_code: Optional[str] = Field(
        default=None,
        description="Machine-readable failure code, None on success"
    )
    value: Optional[Any] = None
    
    @property
    def kind(self) -> NotificationKind:
        return NotificationKind.SUCCESS if self.ok else NotificationKind.ERROR
    
    @classmethod
    def success(cls, value: Any = None, message: str = "") -> "ActionResult":
        return cls(ok=True, value=value, message=message)
    
    @classmethod
    def failure(cls, error_code: str, message: str) -> "ActionResult":
        return cls(ok=False, error_code=error_code, message=message)
