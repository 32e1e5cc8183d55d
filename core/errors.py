# core/errors.py

import httpx
from fastapi import HTTPException

from core.logging_config import logger
from core.permissions import PERMISSION_ERRORS
from core.security_rules import PermissionDenied
from core.store import DocumentNotFound


NETWORK_ERROR_MESSAGE = "Network error. Please check your connection and try again"


def extract_supabase_error(error: Exception) -> str:
    """
    Safely extract readable details from Supabase Python client errors.
    Handles:
      • PostgREST errors
      • GoTrue (Auth) errors
      • Generic Python exceptions
    """

    # Case 1: Supabase Auth / GoTrue / PostgREST errors
    message = getattr(error, "message", None)
    if message:
        return str(message)

    # Case 2: Supabase errors with args (common)
    if getattr(error, "args", None):
        return str(error.args[0])

    # Case 3: Plain string fallback
    return str(error) or type(error).__name__


def is_transient_error(error: Exception) -> bool:
    """Connectivity failures the caller may retry by hand."""
    return isinstance(error, (httpx.TransportError, ConnectionError, TimeoutError))


def handle_store_error(error: Exception, operation: str = "Database operation", status_code: int = 500) -> HTTPException:
    """
    Convert a failed store call into an HTTPException.
    Returns (doesn't raise) so the caller can re-raise with `raise ... from`.

    Permission denials are deterministic: they map to a fixed 403 message
    and the failed rule is only logged.
    """
    if isinstance(error, HTTPException):
        return error

    if isinstance(error, PermissionDenied):
        logger.info(f"{operation}: denied ({error.reason})")
        return HTTPException(status_code=403, detail=PERMISSION_ERRORS["GENERAL_UNAUTHORIZED"])

    if isinstance(error, DocumentNotFound):
        return HTTPException(status_code=404, detail=f"{operation}: Resource not found")

    if is_transient_error(error):
        logger.warning(f"{operation}: transient store failure: {type(error).__name__}: {error}")
        return HTTPException(status_code=503, detail=NETWORK_ERROR_MESSAGE)

    error_detail = extract_supabase_error(error)
    logger.error(f"{operation}: {error_detail}")

    # Provide user-friendly messages for common errors
    error_lower = error_detail.lower()
    if "duplicate" in error_lower or "unique" in error_lower:
        return HTTPException(status_code=409, detail=f"{operation}: Record already exists")
    elif "foreign key" in error_lower:
        return HTTPException(status_code=400, detail=f"{operation}: Invalid reference")
    elif "not found" in error_lower or "does not exist" in error_lower:
        return HTTPException(status_code=404, detail=f"{operation}: Resource not found")
    else:
        return HTTPException(status_code=status_code, detail=operation)
