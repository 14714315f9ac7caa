from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")

GENERIC_FAILURE = (
    "Failed to generate Q&A. The model may have returned an invalid format. "
    "Please try refining your topic."
)


class QAGeneratorError(Exception):
    """Base class for errors raised by the generation pipeline."""


class ValidationError(QAGeneratorError):
    """Caller supplied an unusable request (e.g. blank topic)."""


class MalformedResponse(QAGeneratorError):
    """Oracle reply could not be reduced to a valid, non-empty JSON array."""


class EnrichmentFailure(QAGeneratorError):
    """Summary enrichment failed. Never surfaced to the user."""


class GenerationInProgress(QAGeneratorError):
    """A generation request is already running for this session."""


@dataclass(frozen=True)
class Result(Generic[T]):
    value: Optional[T] = None
    error: Optional[QAGeneratorError] = None

    @classmethod
    def ok(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def fail(cls, error: QAGeneratorError) -> "Result[T]":
        return cls(error=error)

    @property
    def is_ok(self) -> bool:
        return self.error is None

    def unwrap_or(self, default: T) -> T:
        return self.value if self.error is None else default
