"""Batch enrichment pipeline."""

from .config import BatchConfig, Credentials, TaskSelection, clean_word_list
from .context import PipelineServices
from .orchestrator import BatchOrchestrator, process_batch
from .state import BatchReport, PhaseStatus, TermOutcome, TermState

__all__ = [
    "BatchConfig",
    "BatchOrchestrator",
    "BatchReport",
    "Credentials",
    "PhaseStatus",
    "PipelineServices",
    "TaskSelection",
    "TermOutcome",
    "TermState",
    "clean_word_list",
    "process_batch",
]
