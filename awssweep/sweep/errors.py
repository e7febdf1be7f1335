"""Sweep error types and listing error classification.

Decides whether a failed listing call means "this kind is not available here,
skip it" or "something is broken, report it".
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from botocore.exceptions import ClientError


class SweepErrorAction(Enum):
    """Outcome of classifying a listing error."""

    SKIP = "skip"
    FATAL = "fatal"


class SweepListError(Exception):
    """Fatal listing error wrapped with kind and region context."""

    def __init__(self, kind: str, region: str, cause: BaseException) -> None:
        self.kind = kind
        self.region = region
        self.cause = cause
        super().__init__(kind, region, cause)

    def __str__(self) -> str:
        return f"listing {self.kind} ({self.region}): {self.cause}"


class SweepClientError(Exception):
    """Backend client for a region could not be acquired."""

    def __init__(self, region: str, cause: BaseException) -> None:
        self.region = region
        self.cause = cause
        super().__init__(region, cause)

    def __str__(self) -> str:
        return f"getting client ({self.region}): {self.cause}"


class ResourceIdentifierError(ValueError):
    """Natural key could not be encoded into or decoded from an identifier."""


# (error code, message fragment) pairs meaning the operation is structurally
# unavailable for this account or region. An empty fragment matches any message.
SKIP_SWEEP_ERRORS = [
    ("AccessDenied", "not enabled"),
    ("AccessDeniedException", "Account is not authorized to use this service"),
    ("AccessDeniedException", "Your account isn't authorized to call this operation"),
    ("AccessDeniedException", "not supported"),
    ("BadRequestException", "not supported"),
    ("ForbiddenException", "Operation is disabled in this region"),
    ("ForbiddenException", "Request is not authorized"),
    ("InvalidAction", "is not valid"),
    ("InvalidAction", "Unavailable Operation"),
    ("InvalidParameterValueException", "Access Denied to API Version"),
    ("InvalidParameterValueException", "not supported in this region"),
    ("InvalidRequest", "not supported"),
    ("InvalidRequest", "is not available in this region"),
    ("NotImplemented", ""),
    ("OptInRequired", ""),
    ("UnknownOperationException", ""),
    ("UnsupportedOperation", ""),
    ("UnsupportedOperationException", ""),
    ("UnrecognizedClientException", "The security token included in the request is invalid"),
]


def skip_sweep_error(err: Optional[BaseException]) -> bool:
    """Check whether a listing error means the sweep should be skipped.

    Args:
        err: Exception raised by a listing call, or None

    Returns:
        True if the kind is unavailable for this account or region
    """
    if err is None:
        return False

    if not isinstance(err, ClientError):
        return False

    error_code = err.response.get("Error", {}).get("Code", "")
    error_message = err.response.get("Error", {}).get("Message", "")

    for code, fragment in SKIP_SWEEP_ERRORS:
        if error_code == code and fragment in error_message:
            return True

    return False


def classify(err: BaseException) -> SweepErrorAction:
    """Classify a listing error.

    Args:
        err: Exception raised by a listing call

    Returns:
        SKIP when the operation is unsupported here, FATAL otherwise
    """
    if skip_sweep_error(err):
        return SweepErrorAction.SKIP
    return SweepErrorAction.FATAL


def error_code(err: BaseException) -> str:
    """Extract the AWS error code from a ClientError ("" for anything else)."""
    if isinstance(err, ClientError):
        return err.response.get("Error", {}).get("Code", "")
    return ""
