from __future__ import annotations

import io
import json

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from dictionary_factory.cli import main as cli_main
from dictionary_factory.cli.args import parse_cli_args
from dictionary_factory.database.engine import init_db
from dictionary_factory.pipeline.orchestrator import BatchOrchestrator
from dictionary_factory.repository import DictionaryRepository

pytestmark = pytest.mark.cli


def test_run_arguments_have_defaults():
    args = parse_cli_args(["run", "words.txt"])

    assert args.command == "run"
    assert args.tasks == "text,image,audio"
    assert args.style == "anime"
    assert args.overwrite_audio is False
    assert args.local_storage is None


def test_run_rejects_unknown_style():
    with pytest.raises(SystemExit):
        parse_cli_args(["run", "words.txt", "--style", "oil"])


@pytest.mark.parametrize("style", ["anime-healing", "ghibli", "pixel-art", "watercolor"])
def test_run_accepts_style_keywords_and_aliases(style):
    args = parse_cli_args(["run", "words.txt", "--style", style])

    assert args.style == style


def test_run_exits_with_precondition_status_without_credentials(isolated_env, tmp_path):
    words = tmp_path / "words.txt"
    words.write_text("huis\nfiets\n", encoding="utf-8")

    assert cli_main.run_cli(["run", str(words)], out=io.StringIO()) == cli_main.EXIT_PRECONDITION


def test_run_exits_with_precondition_status_for_unknown_task(isolated_env, tmp_path):
    words = tmp_path / "words.txt"
    words.write_text("huis\n", encoding="utf-8")

    status = cli_main.run_cli(["run", str(words), "--tasks", "text,video"], out=io.StringIO())

    assert status == cli_main.EXIT_PRECONDITION


def test_run_exits_with_precondition_status_for_missing_file(isolated_env, tmp_path):
    status = cli_main.run_cli(["run", str(tmp_path / "absent.txt")], out=io.StringIO())

    assert status == cli_main.EXIT_PRECONDITION


def test_run_prints_log_lines_and_reports_failures(
    isolated_env, tmp_path, build_services, entry_payload
):
    def _handler(term):
        if term == "xqzt":
            return {"definition": "INVALID_TERM", "examples": []}
        return entry_payload()

    services = build_services(text_handler=_handler)
    captured = {}

    def _fake_build(settings, tasks, **kwargs):
        captured["settings"] = settings
        captured["tasks"] = tasks
        return BatchOrchestrator(services)

    isolated_env.setattr(cli_main, "build_orchestrator", _fake_build)
    words = tmp_path / "words.txt"
    words.write_text("huis\n\nxqzt\n", encoding="utf-8")
    out = io.StringIO()

    status = cli_main.run_cli(
        ["run", str(words), "--tasks", "text", "--lang", "zh", "--seed", "5"], out=out
    )

    lines = out.getvalue().splitlines()
    assert status == cli_main.EXIT_FAILURES
    assert "[1/2] huis" in lines
    assert "[2/2] xqzt" in lines
    assert "OK huis" in lines
    assert any(line.startswith("FAILED xqzt") for line in lines)
    assert captured["settings"].source_language == "zh"
    assert captured["settings"].image_seed == 5
    assert captured["tasks"].text and not captured["tasks"].image


def _sqlite_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'dictionary.db'}"


def test_init_db_creates_tables(isolated_env, tmp_path):
    out = io.StringIO()

    status = cli_main.run_cli(["init-db", "--database-url", _sqlite_url(tmp_path)], out=out)

    assert status == cli_main.EXIT_OK
    assert "Dictionary tables are ready." in out.getvalue()
    assert (tmp_path / "dictionary.db").exists()


def test_lookup_prints_stored_entry(isolated_env, tmp_path):
    url = _sqlite_url(tmp_path)
    engine = create_engine(url)
    init_db(engine)
    repository = DictionaryRepository(sessionmaker(bind=engine, expire_on_commit=False))
    word = repository.upsert_word("huis", "zn.", {"article": "het"})
    repository.upsert_localized_content(word.id, "en", "a building", "")
    repository.upsert_example(word.id, "en", 0, "Het huis is groot.", "The house is big.")
    repository.upsert_word_image(word.id, "anime", "https://cdn.test/huis.jpg")
    engine.dispose()
    out = io.StringIO()

    status = cli_main.run_cli(
        ["lookup", "Huis", "--lang", "en", "--style", "ghibli", "--database-url", url], out=out
    )

    assert status == cli_main.EXIT_OK
    payload = json.loads(out.getvalue())
    assert payload["definition"] == "a building"
    assert payload["imageUrl"] == "https://cdn.test/huis.jpg"
    assert payload["grammar"]["article"] == "het"

    missing = io.StringIO()
    assert (
        cli_main.run_cli(["lookup", "boom", "--database-url", url], out=missing)
        == cli_main.EXIT_FAILURES
    )
    assert "No entry for 'boom'." in missing.getvalue()


def test_lookup_without_database_url_is_a_precondition_failure(isolated_env):
    assert cli_main.run_cli(["lookup", "huis"], out=io.StringIO()) == cli_main.EXIT_PRECONDITION
