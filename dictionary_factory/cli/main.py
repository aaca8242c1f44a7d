"""Command line entry point for dictionary-factory."""

from __future__ import annotations

import json
import signal
import sys
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, TextIO

from pydantic import SecretStr

from dictionary_factory import logging_manager as log_mgr
from dictionary_factory.config_manager import apply_settings_updates, load_settings
from dictionary_factory.config_manager.settings import FactorySettings
from dictionary_factory.database.engine import (
    create_engine_for_url,
    create_session_factory,
    init_db,
)
from dictionary_factory.errors import MissingCredentialsError, StorageError
from dictionary_factory.images.style_templates import normalize_image_style
from dictionary_factory.languages import normalize_language_code
from dictionary_factory.pipeline.config import TaskSelection, clean_word_list
from dictionary_factory.pipeline.factory import batch_config_from_settings, build_orchestrator
from dictionary_factory.repository import DictionaryRepository

from .args import parse_cli_args

logger = log_mgr.get_logger().getChild("cli")

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_PRECONDITION = 2


def _settings_from_args(args: Any) -> FactorySettings:
    settings = load_settings(args.config)
    updates: Dict[str, Any] = {}
    if getattr(args, "database_url", None):
        updates["database_url"] = SecretStr(args.database_url)
    if getattr(args, "debug", False):
        updates["debug"] = True
    if getattr(args, "lang", None):
        updates["source_language"] = normalize_language_code(args.lang)
    if getattr(args, "tts_backend", None):
        updates["tts_backend"] = args.tts_backend
    if getattr(args, "local_storage", None):
        updates["local_storage_dir"] = str(Path(args.local_storage).expanduser())
    if getattr(args, "seed", None) is not None:
        updates["image_seed"] = args.seed
    return apply_settings_updates(settings, updates)


def _database_url(settings: FactorySettings) -> Optional[str]:
    if settings.database_url is None:
        return None
    return settings.database_url.get_secret_value().strip() or None


def _read_words(path: str) -> List[str]:
    if path == "-":
        return clean_word_list(sys.stdin.read().splitlines())
    with open(path, "r", encoding="utf-8") as handle:
        return clean_word_list(handle.read().splitlines())


def _install_stop_handler(stop_event: threading.Event) -> Any:
    def _handle(signum: int, frame: Any) -> None:
        log_mgr.console_warning(
            "Stop requested; finishing the current term.", logger_obj=logger
        )
        stop_event.set()

    try:
        return signal.signal(signal.SIGINT, _handle)
    except ValueError:
        # Not on the main thread (e.g. embedded use); Ctrl+C keeps its default.
        return None


def _command_run(args: Any, settings: FactorySettings, out: TextIO) -> int:
    try:
        tasks = TaskSelection.from_names(
            args.tasks.split(","),
            image_style=normalize_image_style(args.style),
            overwrite_audio=args.overwrite_audio,
            usage_note_audio=args.usage_note_audio,
        )
    except ValueError as exc:
        log_mgr.console_error(str(exc), logger_obj=logger)
        return EXIT_PRECONDITION

    try:
        words = _read_words(args.words_file)
    except OSError as exc:
        log_mgr.console_error("Unable to read %s: %s", args.words_file, exc, logger_obj=logger)
        return EXIT_PRECONDITION

    try:
        orchestrator = build_orchestrator(settings, tasks)
    except MissingCredentialsError as exc:
        log_mgr.console_error(str(exc), logger_obj=logger)
        return EXIT_PRECONDITION

    stop_event = threading.Event()
    previous_handler = _install_stop_handler(stop_event)
    try:
        report = orchestrator.process_batch(
            words,
            batch_config_from_settings(settings, tasks),
            on_log=lambda line: print(line, file=out, flush=True),
            stop_event=stop_event,
        )
    except MissingCredentialsError as exc:
        log_mgr.console_error(str(exc), logger_obj=logger)
        return EXIT_PRECONDITION
    finally:
        if previous_handler is not None:
            signal.signal(signal.SIGINT, previous_handler)
    return EXIT_FAILURES if report.failed else EXIT_OK


def _command_init_db(settings: FactorySettings, out: TextIO) -> int:
    url = _database_url(settings)
    if not url:
        log_mgr.console_error("Missing credentials: DATABASE_URL", logger_obj=logger)
        return EXIT_PRECONDITION
    init_db(create_engine_for_url(url))
    print("Dictionary tables are ready.", file=out)
    return EXIT_OK


def _command_lookup(args: Any, settings: FactorySettings, out: TextIO) -> int:
    url = _database_url(settings)
    if not url:
        log_mgr.console_error("Missing credentials: DATABASE_URL", logger_obj=logger)
        return EXIT_PRECONDITION
    repository = DictionaryRepository(create_session_factory(url))
    try:
        view = repository.get_entry(
            args.term,
            normalize_language_code(args.lang or settings.source_language),
            normalize_image_style(args.style),
        )
    except StorageError as exc:
        log_mgr.console_error(str(exc), logger_obj=logger)
        return EXIT_FAILURES
    if view is None:
        print(f"No entry for '{args.term}'.", file=out)
        return EXIT_FAILURES
    print(json.dumps(view.as_payload(), ensure_ascii=False, indent=2), file=out)
    return EXIT_OK


def run_cli(argv: Optional[Sequence[str]] = None, *, out: Optional[TextIO] = None) -> int:
    """Primary console script entry point."""

    args = parse_cli_args(argv)
    out = out or sys.stdout
    settings = _settings_from_args(args)
    log_mgr.configure_logging_level(debug_enabled=settings.debug)

    if args.command == "init-db":
        return _command_init_db(settings, out)
    if args.command == "lookup":
        return _command_lookup(args, settings, out)
    return _command_run(args, settings, out)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the dictionary-factory CLI."""

    return run_cli(argv)


if __name__ == "__main__":  # pragma: no cover - manual execution
    sys.exit(main())
