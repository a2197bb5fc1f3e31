"""Outcome type separating "not found" from "failed" from "succeeded"."""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class OperationStatus(str, Enum):
    """How an operation ended."""

    SUCCEEDED = "succeeded"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """Result of an operation that may legitimately find nothing.

    Examples:
        >>> OperationResult.ok(42).value
        42
        >>> OperationResult.not_found("no video stream").is_success
        False
    """

    status: OperationStatus
    value: T | None = None
    error: str | None = None

    @classmethod
    def ok(cls, value: T) -> "OperationResult[T]":
        return cls(status=OperationStatus.SUCCEEDED, value=value)

    @classmethod
    def not_found(cls, reason: str) -> "OperationResult[T]":
        return cls(status=OperationStatus.NOT_FOUND, error=reason)

    @classmethod
    def failed(cls, reason: str) -> "OperationResult[T]":
        return cls(status=OperationStatus.FAILED, error=reason)

    @property
    def is_success(self) -> bool:
        return self.status == OperationStatus.SUCCEEDED

    @property
    def is_not_found(self) -> bool:
        return self.status == OperationStatus.NOT_FOUND

    @property
    def is_failure(self) -> bool:
        return self.status == OperationStatus.FAILED
