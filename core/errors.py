# core/errors.py

from typing import List, Optional, Tuple
from fastapi import HTTPException


# ============================================================
# DOMAIN ERRORS
# ============================================================
# Denials are plain False results and never show up here.

class AccountValidationError(Exception):
    """Caller-fixable problem with an admin account assignment."""

    code = "invalid_account"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_detail(self) -> dict:
        return {"code": self.code, "message": self.message}


class NoAssignedProjects(AccountValidationError):
    code = "no_assigned_projects"

    def __init__(self):
        super().__init__("At least one project must be assigned")


class PermissionValidationError(AccountValidationError):
    """A permission grant that a custom admin could never use."""

    code = "invalid_grant"


class EmptyGrant(PermissionValidationError):
    code = "empty_grant"

    def __init__(self):
        super().__init__("At least one permission must be assigned for custom accounts")


class UnknownEntity(PermissionValidationError):
    code = "unknown_entity"

    def __init__(self, entities: List[str]):
        self.entities = entities
        super().__init__(f"Unknown permission entities: {', '.join(entities)}")

    def to_detail(self) -> dict:
        return {**super().to_detail(), "entities": self.entities}


class UnknownAction(PermissionValidationError):
    code = "unknown_action"

    def __init__(self, pairs: List[Tuple[str, str]]):
        self.pairs = pairs
        listed = ", ".join(f"{entity}:{action}" for entity, action in pairs)
        super().__init__(f"Unknown permission actions: {listed}")

    def to_detail(self) -> dict:
        return {
            **super().to_detail(),
            "errors": [{"entity": e, "action": a} for e, a in self.pairs],
        }


class StateError(Exception):
    """A workflow transition that is not allowed from the current state."""


class AlreadyResolved(StateError):
    def __init__(self, request_id: str, status: Optional[str] = None):
        self.request_id = request_id
        self.status = status
        suffix = f" ({status})" if status else ""
        super().__init__(f"Admin request {request_id} is already resolved{suffix}")


class InvalidPermissionArgument(ValueError):
    """
    Malformed input to an authorization check (unknown entity/action
    literal, missing project id). A defect in the calling code, not a denial.
    """


class RecordNotFound(LookupError):
    def __init__(self, table: str, record_id: str):
        self.table = table
        self.record_id = record_id
        super().__init__(f"{table} record {record_id} not found")


class ProfileLoadError(Exception):
    """A stored admin/guard row that does not parse into an actor."""


# ============================================================
# SUPABASE ERRORS
# ============================================================

def extract_supabase_error(error: Exception) -> str:
    """
    Safely extract readable details from Supabase Python client errors.
    Handles:
      • PostgREST errors
      • GoTrue (Auth) errors
      • Generic Python exceptions
    """

    # Case 1: Supabase Auth / GoTrue / PostgREST APIError
    message = getattr(error, "message", None)
    if message:
        return str(message)

    # Case 2: Supabase errors with args (common)
    if getattr(error, "args", None):
        return str(error.args[0])

    # Case 3: Plain string fallback
    return str(error) or "Unknown Supabase error"


def handle_supabase_error(error: Exception, operation: str = "Database operation", status_code: int = 500) -> HTTPException:
    """
    Handle Supabase errors with consistent formatting.
    Returns HTTPException (doesn't raise) so caller can customize or re-raise.
    """
    from core.logging_config import logger

    error_detail = extract_supabase_error(error)
    logger.error(f"{operation}: {error_detail}")

    # Provide user-friendly messages for common errors
    error_lower = error_detail.lower()
    if "duplicate" in error_lower or "unique" in error_lower:
        return HTTPException(status_code=400, detail=f"{operation}: Record already exists")
    elif "foreign key" in error_lower:
        return HTTPException(status_code=400, detail=f"{operation}: Invalid reference")
    elif "not found" in error_lower or "does not exist" in error_lower:
        return HTTPException(status_code=404, detail=f"{operation}: Resource not found")
    else:
        return HTTPException(status_code=status_code, detail=f"{operation} failed")


def validation_http_error(error: AccountValidationError) -> HTTPException:
    """Grant validation failures are form errors for the operator."""
    return HTTPException(status_code=400, detail=error.to_detail())


def state_http_error(error: StateError) -> HTTPException:
    return HTTPException(status_code=409, detail=str(error))
