from __future__ import annotations

import pytest

from dictionary_factory.pipeline.config import (
    BatchConfig,
    Credentials,
    TaskSelection,
    clean_word_list,
)
from dictionary_factory.pipeline.state import (
    BatchReport,
    InvalidTransitionError,
    TermOutcome,
    TermState,
)

pytestmark = pytest.mark.pipeline


def test_task_names_expand_audio_to_word_and_examples():
    tasks = TaskSelection.from_names(["Text", " audio "], image_style="Ghibli")

    assert tasks.text and not tasks.image
    assert tasks.audio_word and tasks.audio_example_1 and tasks.audio_example_2
    assert not tasks.audio_usage_note
    assert tasks.style == "anime"


def test_individual_audio_slots_can_be_selected():
    tasks = TaskSelection.from_names(["audio_example_2"], usage_note_audio=True)

    assert not tasks.audio_word and not tasks.audio_example_1
    assert tasks.audio_example_2 and tasks.audio_usage_note
    assert tasks.any_audio


def test_unknown_task_names_are_rejected():
    with pytest.raises(ValueError, match="video"):
        TaskSelection.from_names(["text", "video"])


def test_credentials_only_required_for_selected_tasks():
    text_only = TaskSelection.from_names(["text"])
    everything = TaskSelection.from_names(["text", "image", "audio"])

    assert Credentials(database_url="sqlite://", gemini_api_key="k").missing_for(text_only) == []
    assert Credentials(
        database_url="sqlite://", chat_llm_url="https://llm.test", chat_llm_api_key="k"
    ).missing_for(text_only) == []
    assert Credentials().missing_for(everything) == [
        "DATABASE_URL",
        "GEMINI_API_KEY",
        "SUPABASE_URL/SUPABASE_SERVICE_ROLE_KEY",
    ]


def test_elevenlabs_audio_needs_its_own_key():
    audio = TaskSelection.from_names(["audio"])
    credentials = Credentials(database_url="sqlite://", local_storage_dir="/tmp/assets")

    assert credentials.missing_for(audio, tts_backend="elevenlabs") == ["ELEVENLABS_API_KEY"]
    assert credentials.missing_for(audio) == ["GEMINI_API_KEY"]


def test_batch_config_normalizes_language_codes():
    config = BatchConfig(source_language="zh-CN", target_language="NL")

    assert config.language_code == "zh"
    assert config.target_code == "nl"
    assert BatchConfig(source_language="xx").language_code == "en"


def test_clean_word_list_trims_and_keeps_order():
    assert clean_word_list(["  huis", "", "fiets  ", "   ", "huis"]) == ["huis", "fiets", "huis"]


def test_term_outcome_follows_state_machine():
    outcome = TermOutcome(term="huis")
    outcome.advance(TermState.TEXT_DONE)
    outcome.advance(TermState.IMAGE_SKIPPED)

    with pytest.raises(InvalidTransitionError):
        outcome.advance(TermState.TEXT_DONE)

    outcome.advance(TermState.AUDIO_DONE)
    outcome.advance(TermState.TERM_COMPLETE)
    with pytest.raises(InvalidTransitionError):
        outcome.fail("too late")


def test_term_failed_is_absorbing():
    outcome = TermOutcome(term="xqzt")
    outcome.fail("rejected")

    assert outcome.failed
    with pytest.raises(InvalidTransitionError):
        outcome.advance(TermState.TEXT_DONE)


def test_batch_report_groups_outcomes():
    ok = TermOutcome(term="a")
    partial = TermOutcome(term="b")
    for outcome in (ok, partial):
        for state in (
            TermState.TEXT_DONE,
            TermState.IMAGE_DONE,
            TermState.AUDIO_DONE,
            TermState.TERM_COMPLETE,
        ):
            outcome.advance(state)
    partial.failures.append("image: quota")
    failed = TermOutcome(term="c")
    failed.fail("text: boom")

    report = BatchReport(outcomes=[ok, partial, failed])

    assert [o.term for o in report.succeeded] == ["a"]
    assert [o.term for o in report.partial] == ["b"]
    assert [o.term for o in report.failed] == ["c"]
    assert report.outcome_for("missing") is None
