"""
Failure kinds surfaced by the post and comment lifecycles.

Every check is terminal: components return the first failing error and
commit nothing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ErrorKind = Literal[
    "unauthenticated",
    "forbidden",
    "not_found",
    "validation_failed",
    "conflict",
    "storage_failure",
]

STORAGE_FAILURE_MESSAGE = "Storage operation failed"


@dataclass(frozen=True)
class LifecycleError:
    """Error details for lifecycle operations."""

    code: str
    message: str
    kind: ErrorKind
    field: str | None = None


def not_found(code: str, message: str, field: str | None = None) -> LifecycleError:
    return LifecycleError(code=code, message=message, kind="not_found", field=field)


def forbidden(code: str, message: str, field: str | None = None) -> LifecycleError:
    return LifecycleError(code=code, message=message, kind="forbidden", field=field)


def conflict(code: str, message: str, field: str | None = None) -> LifecycleError:
    return LifecycleError(code=code, message=message, kind="conflict", field=field)


def invalid(code: str, message: str, field: str | None = None) -> LifecycleError:
    return LifecycleError(code=code, message=message, kind="validation_failed", field=field)


def storage_failure() -> LifecycleError:
    # Storage detail is logged by the caller, never returned.
    return LifecycleError(
        code="STORAGE_FAILURE", message=STORAGE_FAILURE_MESSAGE, kind="storage_failure"
    )
