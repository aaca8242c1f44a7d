"""Sequential batch driver: text, image and audio for each term."""

from __future__ import annotations

import logging
import threading
import uuid
from typing import Iterable, List, Optional

from dictionary_factory import logging_manager as log_mgr
from dictionary_factory.errors import (
    DictionaryFactoryError,
    MissingCredentialsError,
    TermRejectedError,
)
from dictionary_factory.guards import Pacer

from .config import BatchConfig, clean_word_list
from .context import LogEmitter, LogSink, PhaseContext, PipelineServices, TermWork
from .phases import generate_audio, generate_image, generate_text, load_existing
from .state import BatchReport, PhaseStatus, TermOutcome, TermState

logger = log_mgr.get_logger().getChild("pipeline.orchestrator")


def _log_unexpected(exc: Exception, stage: str) -> None:
    if not isinstance(exc, DictionaryFactoryError):
        logger.warning(
            "Unexpected %s failure",
            stage,
            exc_info=exc,
            extra={"event": f"{stage}.unexpected", "console_suppress": True},
        )


class BatchOrchestrator:
    """Process a word list one term at a time.

    Every failure is contained at the term boundary: the batch always moves
    on to the next term. Only missing collaborators for the selected tasks
    abort the batch, before any term is touched.
    """

    def __init__(self, services: PipelineServices) -> None:
        self.services = services

    def _missing_services(self, config: BatchConfig) -> List[str]:
        tasks = config.tasks
        services = self.services
        missing: List[str] = []
        if tasks.text and services.text_generator is None:
            missing.append("text provider")
        if tasks.image and services.image_generator is None:
            missing.append("image provider")
        if tasks.any_audio and services.synthesizer is None:
            missing.append("speech provider")
        if (tasks.image or tasks.any_audio) and services.asset_store is None:
            missing.append("asset storage")
        return missing

    def process_batch(
        self,
        words: Iterable[str],
        config: BatchConfig,
        *,
        on_log: Optional[LogSink] = None,
        stop_event: Optional[threading.Event] = None,
        batch_id: Optional[str] = None,
    ) -> BatchReport:
        missing = self._missing_services(config)
        if missing:
            raise MissingCredentialsError(missing)

        terms = clean_word_list(words)
        emit = LogEmitter(on_log)
        pacer = Pacer(stop_event)
        ctx = PhaseContext(services=self.services, config=config, emit=emit, pacer=pacer)
        report = BatchReport()
        batch_id = batch_id or uuid.uuid4().hex[:12]

        with log_mgr.log_context(batch_id=batch_id):
            emit(
                f"Starting batch of {len(terms)} term(s) "
                f"[{config.language_code} / {config.target_code}]",
                event="batch.start",
            )
            for position, term in enumerate(terms, start=1):
                if pacer.stopped:
                    report.stopped = True
                    emit(
                        f"Stop requested; {len(terms) - position + 1} term(s) not processed",
                        level=logging.WARNING,
                        event="batch.stopped",
                    )
                    break
                with log_mgr.log_context(term=term):
                    emit(f"[{position}/{len(terms)}] {term}", event="term.start")
                    outcome = self._process_term(term, ctx)
                    report.outcomes.append(outcome)
                    self._summarize(outcome, emit)
                if position < len(terms):
                    pacer.pause(config.inter_term_delay_seconds)

            emit(
                f"Batch finished: {len(report.succeeded)} ok, {len(report.partial)} partial, "
                f"{len(report.failed)} failed",
                event="batch.finish",
            )
        return report

    # ------------------------------------------------------------------
    # Per-term processing
    # ------------------------------------------------------------------
    def _process_term(self, term: str, ctx: PhaseContext) -> TermOutcome:
        outcome = TermOutcome(term=term)
        work = TermWork(term=term)
        try:
            if not self._run_text(work, outcome, ctx):
                return outcome
            outcome.word_id = work.word.id if work.word else None
            self._run_image(work, outcome, ctx)
            self._run_audio(work, outcome, ctx)
            outcome.advance(TermState.TERM_COMPLETE)
        except Exception as exc:
            logger.exception("Unexpected failure while processing '%s'", term)
            if not outcome.failed:
                outcome.fail(f"unexpected error: {exc}")
        return outcome

    def _run_text(self, work: TermWork, outcome: TermOutcome, ctx: PhaseContext) -> bool:
        tasks = ctx.config.tasks
        emit = ctx.emit
        if tasks.text:
            try:
                generate_text(work, ctx)
            except TermRejectedError as exc:
                outcome.phases["text"] = PhaseStatus.FAILED
                emit(f"  Rejected: {exc}", level=logging.WARNING, event="text.rejected", stage="text")
                outcome.fail(str(exc))
                return False
            except DictionaryFactoryError as exc:
                outcome.phases["text"] = PhaseStatus.FAILED
                emit(f"  Text failed: {exc}", level=logging.ERROR, event="text.failed", stage="text")
                outcome.fail(f"text: {exc}")
                return False
            outcome.phases["text"] = PhaseStatus.DONE
            outcome.advance(TermState.TEXT_DONE)
            return True

        outcome.phases["text"] = PhaseStatus.SKIPPED
        if tasks.image or tasks.any_audio:
            try:
                found = load_existing(work, ctx)
            except DictionaryFactoryError as exc:
                emit(f"  Lookup failed: {exc}", level=logging.ERROR, event="text.lookup_failed")
                outcome.fail(f"lookup: {exc}")
                return False
            if not found:
                emit(
                    f"  NOT FOUND in database: '{work.term}'. Skipping image/audio.",
                    level=logging.WARNING,
                    event="text.not_found",
                    stage="text",
                )
                outcome.fail("word not found")
                return False
        outcome.advance(TermState.TEXT_SKIPPED)
        return True

    def _run_image(self, work: TermWork, outcome: TermOutcome, ctx: PhaseContext) -> None:
        if not ctx.config.tasks.image or work.word is None:
            outcome.phases["image"] = PhaseStatus.SKIPPED
            outcome.advance(TermState.IMAGE_SKIPPED)
            return
        try:
            generate_image(work, ctx)
        except Exception as exc:
            _log_unexpected(exc, "image")
            outcome.phases["image"] = PhaseStatus.FAILED
            outcome.failures.append(f"image: {exc}")
            ctx.emit(
                f"  Image failed: {exc}", level=logging.WARNING, event="image.failed", stage="image"
            )
            outcome.advance(TermState.IMAGE_SKIPPED)
            return
        outcome.phases["image"] = PhaseStatus.DONE
        outcome.advance(TermState.IMAGE_DONE)

    def _run_audio(self, work: TermWork, outcome: TermOutcome, ctx: PhaseContext) -> None:
        if not ctx.config.tasks.any_audio or work.word is None:
            outcome.phases["audio"] = PhaseStatus.SKIPPED
            outcome.advance(TermState.AUDIO_SKIPPED)
            return
        try:
            result = generate_audio(work, ctx)
        except Exception as exc:
            _log_unexpected(exc, "audio")
            outcome.phases["audio"] = PhaseStatus.FAILED
            outcome.failures.append(f"audio: {exc}")
            ctx.emit(
                f"  Audio failed: {exc}", level=logging.WARNING, event="audio.failed", stage="audio"
            )
            outcome.advance(TermState.AUDIO_SKIPPED)
            return
        outcome.failures.extend(result.failures)
        if result.any_success:
            outcome.phases["audio"] = PhaseStatus.DONE
            outcome.advance(TermState.AUDIO_DONE)
        else:
            outcome.phases["audio"] = (
                PhaseStatus.FAILED if result.failures else PhaseStatus.SKIPPED
            )
            outcome.advance(TermState.AUDIO_SKIPPED)

    @staticmethod
    def _summarize(outcome: TermOutcome, emit: LogEmitter) -> None:
        if outcome.failed:
            emit(
                f"FAILED {outcome.term}: {'; '.join(outcome.failures)}",
                level=logging.ERROR,
                event="term.failed",
                stage="summary",
            )
        elif outcome.partial:
            emit(
                f"PARTIAL {outcome.term}: {'; '.join(outcome.failures)}",
                level=logging.WARNING,
                event="term.partial",
                stage="summary",
            )
        else:
            emit(f"OK {outcome.term}", event="term.complete", stage="summary")


def process_batch(
    words: Iterable[str],
    config: BatchConfig,
    services: PipelineServices,
    *,
    on_log: Optional[LogSink] = None,
    stop_event: Optional[threading.Event] = None,
) -> BatchReport:
    """Convenience wrapper around :meth:`BatchOrchestrator.process_batch`."""

    return BatchOrchestrator(services).process_batch(
        words, config, on_log=on_log, stop_event=stop_event
    )


__all__ = ["BatchOrchestrator", "process_batch"]
