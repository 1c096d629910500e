"""
Result types for the scheduling engine.

Calculators never raise for bad input: they hand back an Outcome carrying
either a value or an EngineFailure. Non-fatal findings (stale role ids)
ride along as warnings on a successful Outcome.
"""

from enum import Enum
from typing import Generic, Optional, Tuple, TypeVar
from dataclasses import dataclass

T = TypeVar("T")


class FailureType(str, Enum):
    INVALID_CONFIGURATION = "InvalidConfiguration"
    OUT_OF_RANGE_REQUEST = "OutOfRangeRequest"


@dataclass(frozen=True)
class EngineFailure:
    """Detailed reason the engine could not compute."""
    failure_type: FailureType
    reason: str
    subject_id: Optional[str] = None  # team / segment / task the failure is about


@dataclass(frozen=True)
class StaleReference:
    """A role composition entry pointing at a role missing from the catalog."""
    role_id: str
    count: int
    subject_id: Optional[str] = None

    @property
    def reason(self) -> str:
        return f"Role {self.role_id} (x{self.count}) is not in the role catalog"


class EngineError(Exception):
    """Raised by Outcome.unwrap() for callers that prefer exceptions."""

    def __init__(self, failure: EngineFailure):
        super().__init__(f"{failure.failure_type.value}: {failure.reason}")
        self.failure = failure


@dataclass(frozen=True)
class Outcome(Generic[T]):
    value: Optional[T] = None
    failure: Optional[EngineFailure] = None
    warnings: Tuple[StaleReference, ...] = ()

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, value: T, warnings: Tuple[StaleReference, ...] = ()) -> "Outcome[T]":
        return cls(value=value, warnings=tuple(warnings))

    @classmethod
    def fail(cls, failure_type: FailureType, reason: str, subject_id: Optional[str] = None) -> "Outcome[T]":
        return cls(failure=EngineFailure(failure_type, reason, subject_id))

    def unwrap(self) -> T:
        if self.failure is not None:
            raise EngineError(self.failure)
        return self.value


def invalid_configuration(reason: str, subject_id: Optional[str] = None) -> Outcome:
    return Outcome.fail(FailureType.INVALID_CONFIGURATION, reason, subject_id)


def out_of_range(reason: str, subject_id: Optional[str] = None) -> Outcome:
    return Outcome.fail(FailureType.OUT_OF_RANGE_REQUEST, reason, subject_id)
