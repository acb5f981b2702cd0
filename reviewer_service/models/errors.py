# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Error taxonomy.

DomainError covers expected business-rule violations and always carries one
of the ErrorCode values. StorageError covers infrastructure failures
(unreachable database, bad query, timeout) and keeps the driver exception as
its ``__cause__``. The two do not share a base class beyond Exception.
"""

from enum import Enum


class ErrorCode(str, Enum):
    TEAM_EXISTS = "TEAM_EXISTS"
    PR_EXISTS = "PR_EXISTS"
    PR_MERGED = "PR_MERGED"
    NOT_ASSIGNED = "NOT_ASSIGNED"
    NO_CANDIDATE = "NO_CANDIDATE"
    NOT_FOUND = "NOT_FOUND"


class DomainError(Exception):
    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"


class StorageError(Exception):
    """A store call failed for reasons unrelated to business rules."""
