"""Per-term state machine and batch report."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class TermState(str, Enum):
    PENDING = "pending"
    TEXT_DONE = "text_done"
    TEXT_SKIPPED = "text_skipped"
    IMAGE_DONE = "image_done"
    IMAGE_SKIPPED = "image_skipped"
    AUDIO_DONE = "audio_done"
    AUDIO_SKIPPED = "audio_skipped"
    TERM_COMPLETE = "term_complete"
    TERM_FAILED = "term_failed"


class PhaseStatus(str, Enum):
    DONE = "done"
    SKIPPED = "skipped"
    FAILED = "failed"
    NOT_RUN = "not_run"


_TRANSITIONS: Dict[TermState, tuple[TermState, ...]] = {
    TermState.PENDING: (TermState.TEXT_DONE, TermState.TEXT_SKIPPED),
    TermState.TEXT_DONE: (TermState.IMAGE_DONE, TermState.IMAGE_SKIPPED),
    TermState.TEXT_SKIPPED: (TermState.IMAGE_DONE, TermState.IMAGE_SKIPPED),
    TermState.IMAGE_DONE: (TermState.AUDIO_DONE, TermState.AUDIO_SKIPPED),
    TermState.IMAGE_SKIPPED: (TermState.AUDIO_DONE, TermState.AUDIO_SKIPPED),
    TermState.AUDIO_DONE: (TermState.TERM_COMPLETE,),
    TermState.AUDIO_SKIPPED: (TermState.TERM_COMPLETE,),
    TermState.TERM_COMPLETE: (),
    TermState.TERM_FAILED: (),
}


class InvalidTransitionError(RuntimeError):
    """Raised when the orchestrator attempts an illegal state change."""


@dataclass
class TermOutcome:
    """What happened to one term during a batch."""

    term: str
    state: TermState = TermState.PENDING
    history: List[TermState] = field(default_factory=lambda: [TermState.PENDING])
    phases: Dict[str, PhaseStatus] = field(
        default_factory=lambda: {
            "text": PhaseStatus.NOT_RUN,
            "image": PhaseStatus.NOT_RUN,
            "audio": PhaseStatus.NOT_RUN,
        }
    )
    failures: List[str] = field(default_factory=list)
    word_id: Optional[str] = None

    def advance(self, new_state: TermState) -> None:
        if new_state is TermState.TERM_FAILED:
            if self.state in (TermState.TERM_COMPLETE, TermState.TERM_FAILED):
                raise InvalidTransitionError(f"{self.term}: already terminal ({self.state.value})")
        elif new_state not in _TRANSITIONS[self.state]:
            raise InvalidTransitionError(
                f"{self.term}: {self.state.value} -> {new_state.value} is not allowed"
            )
        self.state = new_state
        self.history.append(new_state)

    def fail(self, message: str) -> None:
        self.failures.append(message)
        self.advance(TermState.TERM_FAILED)

    @property
    def failed(self) -> bool:
        return self.state is TermState.TERM_FAILED

    @property
    def partial(self) -> bool:
        return self.state is TermState.TERM_COMPLETE and bool(self.failures)


@dataclass
class BatchReport:
    outcomes: List[TermOutcome] = field(default_factory=list)
    stopped: bool = False

    @property
    def succeeded(self) -> List[TermOutcome]:
        return [o for o in self.outcomes if o.state is TermState.TERM_COMPLETE and not o.failures]

    @property
    def partial(self) -> List[TermOutcome]:
        return [o for o in self.outcomes if o.partial]

    @property
    def failed(self) -> List[TermOutcome]:
        return [o for o in self.outcomes if o.failed]

    def outcome_for(self, term: str) -> Optional[TermOutcome]:
        for outcome in self.outcomes:
            if outcome.term == term:
                return outcome
        return None


__all__ = [
    "BatchReport",
    "InvalidTransitionError",
    "PhaseStatus",
    "TermOutcome",
    "TermState",
]
