from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Callable, Generic, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")

Stage = Callable[[Any], "StageResult[Any]"]


@dataclass(frozen=True)
class PipelineError:
    kind: str
    reason: str
    stage: str = ""


def parse_failure(reason: str) -> PipelineError:
    return PipelineError(kind="parse_failure", reason=reason)


def validation_failure(reason: str) -> PipelineError:
    return PipelineError(kind="validation_failure", reason=reason)


@dataclass(frozen=True)
class StageResult(Generic[T]):
    value: T | None = None
    error: PipelineError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "StageResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: PipelineError) -> "StageResult[T]":
        return cls(error=error)


@dataclass(frozen=True)
class GenerationOutcome(Generic[T]):
    content: T
    source: str
    failure: PipelineError | None = None

    @property
    def is_fallback(self) -> bool:
        return self.source == "fallback"


def normalize_error_reason(value: Any) -> str:
    return " ".join(str(value or "").split())[:260] or "unknown_failure"


def run_stages(initial: Any, stages: list[tuple[str, Stage]]) -> StageResult[Any]:
    """Feed each stage the previous value; the first failed stage short-circuits."""
    current: StageResult[Any] = StageResult.success(initial)
    for name, stage in stages:
        current = stage(current.value)
        if not current.ok:
            error = current.error
            return StageResult.failure(
                PipelineError(kind=error.kind, reason=normalize_error_reason(error.reason), stage=name)
            )
    return current


def run_with_fallback(
    initial: Any,
    stages: list[tuple[str, Stage]],
    *,
    pipeline: str,
    fallback: Callable[[], T],
) -> GenerationOutcome[T]:
    result = run_stages(initial, stages)
    if result.ok:
        logger.info("%s: generated content accepted", pipeline)
        return GenerationOutcome(content=result.value, source="generated")

    error = result.error
    logger.warning(
        "%s: %s at stage %s (%s); serving fallback content",
        pipeline,
        error.kind,
        error.stage,
        error.reason,
    )
    return GenerationOutcome(content=fallback(), source="fallback", failure=error)
