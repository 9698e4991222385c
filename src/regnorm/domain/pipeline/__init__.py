"""Record-level orchestration and batch execution."""

from __future__ import annotations

from regnorm.domain.pipeline.batch import (
    DEFAULT_WORKERS,
    BatchResult,
    BatchRunner,
    RecordFailure,
)
from regnorm.domain.pipeline.locks import KeyedLocks
from regnorm.domain.pipeline.orchestrator import PipelineOrchestrator, PreparedRecord

__all__ = [
    "DEFAULT_WORKERS",
    "BatchResult",
    "BatchRunner",
    "KeyedLocks",
    "PipelineOrchestrator",
    "PreparedRecord",
    "RecordFailure",
]
