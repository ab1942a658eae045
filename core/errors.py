# core/errors.py

from functools import wraps
from typing import Callable, List, Optional

from pydantic import ValidationError

from core.logging_config import logger
from models.enums import ErrorCode
from models.results import OperationResult


def extract_supabase_error(error: Exception) -> str:
    """
    Safely extract readable details from Supabase Python client errors.
    Handles:
      • PostgREST errors
      • GoTrue (Auth) errors
      • Generic Python exceptions
    """

    # Case 1: Supabase Auth / GoTrue / PostgREST errors carry .message
    message = getattr(error, "message", None)
    if message:
        return str(message)

    # Case 2: errors with args (common)
    if getattr(error, "args", None):
        return str(error.args[0])

    # Case 3: Plain string fallback
    return str(error) or "Unknown Supabase error"


# ============================================================
# Error taxonomy
# ============================================================
# Internal helpers raise these; operation_boundary() turns them into
# OperationResult failures so nothing escapes a public operation.

class CMSError(Exception):
    code = ErrorCode.external_failure
    summary = "Operation failed"

    def __init__(self, detail: Optional[str] = None, errors: Optional[List[str]] = None):
        self.detail = detail or self.summary
        self.errors = list(errors or [])
        super().__init__(self.detail)


class InvalidInput(CMSError):
    code = ErrorCode.validation_error
    summary = "Validation failed"

    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors), errors=errors)

    @classmethod
    def from_validation_error(cls, exc: ValidationError) -> "InvalidInput":
        """Flatten a pydantic ValidationError into readable messages."""
        messages = []
        for err in exc.errors():
            field = ".".join(str(part) for part in err.get("loc", ()))
            if err.get("type") == "missing":
                messages.append(f"{field} is required")
                continue
            ctx_error = (err.get("ctx") or {}).get("error")
            messages.append(str(ctx_error) if ctx_error else f"{field}: {err['msg']}")
        return cls(messages)


class PermissionDenied(CMSError):
    code = ErrorCode.permission_denied
    summary = "Permission denied"


class StateConflict(CMSError):
    code = ErrorCode.state_conflict
    summary = "State conflict"


class ProtectedEntity(CMSError):
    code = ErrorCode.protected_entity
    summary = "Protected entity"


class NotFound(CMSError):
    code = ErrorCode.not_found
    summary = "Not found"


class ExternalFailure(CMSError):
    code = ErrorCode.external_failure
    summary = "External service failure"


def supabase_error(error: Exception, message: str = "Supabase error"):
    """
    Convert Supabase / database errors into ExternalFailure.
    Always raises; caller should wrap with try/except.
    """

    detail = extract_supabase_error(error)

    raise ExternalFailure(f"{message}: {detail}") from error


def failure_result(exc: CMSError, operation: str) -> OperationResult:
    return OperationResult.fail(
        exc.code,
        f"{operation} failed: {exc.summary}",
        error=exc.detail,
        errors=exc.errors,
    )


def operation_boundary(operation: str) -> Callable:
    """
    Decorator for public operations returning OperationResult.

    Example:
        @operation_boundary("Publish content")
        def publish(self, content_id: str, notes: str = None):
            ...
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs) -> OperationResult:
            try:
                return func(*args, **kwargs)
            except ExternalFailure as exc:
                logger.error(f"{operation} failed: {exc.detail}")
                return failure_result(exc, operation)
            except CMSError as exc:
                logger.warning(f"{operation} refused ({exc.code}): {exc.detail}")
                return failure_result(exc, operation)
            except Exception as exc:
                logger.error(f"Unexpected error in {operation}: {exc}", exc_info=True)
                return OperationResult.fail(
                    ErrorCode.external_failure,
                    f"{operation} failed: Unexpected error",
                    error=extract_supabase_error(exc),
                )

        return wrapper

    return decorator
