from __future__ import annotations

import pytest
from pydantic import ValidationError

from dictionary_factory.text.models import DictionaryEntry, GrammarData

pytestmark = pytest.mark.text


def test_grammar_data_accepts_camel_and_snake_case():
    camel = GrammarData.model_validate({"verbForms": "lopen - liep - gelopen"})
    snake = GrammarData.model_validate({"verb_forms": "lopen - liep - gelopen"})

    assert camel.verb_forms == snake.verb_forms == "lopen - liep - gelopen"


def test_grammar_data_storage_uses_camel_case_and_drops_blanks():
    grammar = GrammarData.model_validate(
        {
            "plural": "",
            "article": "de",
            "adjectiveForms": "groot - groter - grootst",
            "synonyms": "fiets, rijwiel",
            "antonyms": None,
        }
    )

    assert grammar.to_storage() == {
        "article": "de",
        "adjectiveForms": "groot - groter - grootst",
        "synonyms": ["fiets", "rijwiel"],
        "antonyms": [],
    }


def test_entry_reads_grammar_from_any_known_key(entry_payload):
    payload = entry_payload()
    payload["grammar"] = payload.pop("grammar_data")

    entry = DictionaryEntry.model_validate(payload)

    assert entry.grammar_data.article == "het"


def test_entry_with_null_grammar_gets_empty_bag(entry_payload):
    entry = DictionaryEntry.model_validate(entry_payload(grammar_data=None))

    assert entry.grammar_data.to_storage() == {"synonyms": [], "antonyms": []}


def test_entry_requires_definition(entry_payload):
    payload = entry_payload()
    del payload["definition"]

    with pytest.raises(ValidationError):
        DictionaryEntry.model_validate(payload)
