# models/results.py

from typing import Any, List, Optional
from pydantic import BaseModel, Field

from models.enums import ErrorCode


class OperationResult(BaseModel):
    """
    Uniform return shape of every public core operation.

    Operations never raise across their boundary: failures come back with
    success=False, a short machine-oriented message, the underlying error
    text and an ErrorCode so callers can tell "never allowed" from
    "not allowed right now".
    """

    success: bool
    message: str
    error: Optional[str] = None
    error_code: Optional[ErrorCode] = None
    errors: List[str] = Field(default_factory=list)
    data: Optional[Any] = None

    @classmethod
    def ok(cls, message: str, data: Any = None) -> "OperationResult":
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(
        cls,
        code: ErrorCode,
        message: str,
        error: Optional[str] = None,
        errors: Optional[List[str]] = None,
    ) -> "OperationResult":
        return cls(
            success=False,
            message=message,
            error=error,
            error_code=code,
            errors=errors or [],
        )
