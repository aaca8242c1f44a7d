"""Argument parsing helpers for the dictionary-factory CLI."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from dictionary_factory.images.style_templates import DEFAULT_IMAGE_STYLE, image_style_choices
from dictionary_factory.languages import LANGUAGE_NAMES


def _add_shared_arguments(parser: argparse.ArgumentParser) -> argparse.ArgumentParser:
    parser.add_argument(
        "--config",
        default=None,
        help=(
            "Path to a configuration override JSON file (defaults to conf/config.local.json "
            "if present)."
        ),
    )
    parser.add_argument("--database-url", help="Override the database URL.")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging output.")
    return parser


def _add_run_arguments(parser: argparse.ArgumentParser) -> argparse.ArgumentParser:
    parser.add_argument("words_file", help="Text file with one term per line ('-' for stdin).")
    parser.add_argument(
        "--lang",
        default=None,
        help=(
            "Language code for definitions and translations "
            f"({', '.join(sorted(LANGUAGE_NAMES))}); defaults to the configured source language."
        ),
    )
    parser.add_argument(
        "--tasks",
        default="text,image,audio",
        help=(
            "Comma-separated tasks: text, image, audio, or individual slots audio_word, "
            "audio_example_1, audio_example_2, audio_usage_note."
        ),
    )
    parser.add_argument(
        "--style",
        default=DEFAULT_IMAGE_STYLE,
        choices=image_style_choices(),
        help="Illustration style.",
    )
    parser.add_argument(
        "--overwrite-audio",
        action="store_true",
        help="Regenerate audio even when a slot already has a URL.",
    )
    parser.add_argument(
        "--usage-note-audio",
        action="store_true",
        help="Also synthesize the usage note.",
    )
    parser.add_argument(
        "--tts-backend",
        choices=["gemini", "elevenlabs"],
        default=None,
        help="Speech backend; defaults to the configured one.",
    )
    parser.add_argument(
        "--local-storage",
        metavar="DIR",
        default=None,
        help="Write assets to DIR instead of Supabase Storage.",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for backdrop selection.")
    return parser


def build_cli_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dictionary-factory",
        description="Fill the learner's dictionary with generated text, images and audio.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Process a word list", allow_abbrev=False)
    _add_shared_arguments(run_parser)
    _add_run_arguments(run_parser)

    init_parser = subparsers.add_parser("init-db", help="Create the dictionary tables")
    _add_shared_arguments(init_parser)

    lookup_parser = subparsers.add_parser("lookup", help="Show a stored entry as JSON")
    _add_shared_arguments(lookup_parser)
    lookup_parser.add_argument("term", help="Headword to look up.")
    lookup_parser.add_argument("--lang", default=None, help="Definition language code.")
    lookup_parser.add_argument(
        "--style",
        default=DEFAULT_IMAGE_STYLE,
        help="Illustration style; only an image of exactly this style is returned.",
    )
    return parser


def parse_cli_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    return build_cli_parser().parse_args(argv)


__all__ = ["build_cli_parser", "parse_cli_args"]
