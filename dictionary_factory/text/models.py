"""Typed contract for generated dictionary entries."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class GrammarData(BaseModel):
    """Inflection and lexical relations, always in the target language."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    plural: Optional[str] = None
    article: Optional[str] = None
    verb_forms: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("verbForms", "verb_forms"),
        serialization_alias="verbForms",
    )
    adjective_forms: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("adjectiveForms", "adjective_forms"),
        serialization_alias="adjectiveForms",
    )
    synonyms: List[str] = Field(default_factory=list)
    antonyms: List[str] = Field(default_factory=list)

    @field_validator("plural", "article", "verb_forms", "adjective_forms", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("synonyms", "antonyms", mode="before")
    @classmethod
    def _coerce_list(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    def to_storage(self) -> Dict[str, Any]:
        """Return the JSON bag persisted in ``words.grammar_data``."""

        return self.model_dump(by_alias=True, exclude_none=True)


class ExampleSentence(BaseModel):
    model_config = ConfigDict(extra="ignore")

    target: str
    translation: str


class DictionaryEntry(BaseModel):
    """A generated entry: definition, grammar, usage note and two examples."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    definition: str
    part_of_speech: str = Field(
        default="",
        validation_alias=AliasChoices("partOfSpeech", "part_of_speech"),
        serialization_alias="partOfSpeech",
    )
    grammar_data: GrammarData = Field(
        default_factory=GrammarData,
        validation_alias=AliasChoices("grammar_data", "grammarData", "grammar"),
    )
    usage_note: str = Field(
        default="",
        validation_alias=AliasChoices("usageNote", "usage_note"),
        serialization_alias="usageNote",
    )
    examples: List[ExampleSentence]

    @field_validator("grammar_data", mode="before")
    @classmethod
    def _default_grammar(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("examples")
    @classmethod
    def _exactly_two(cls, value: List[ExampleSentence]) -> List[ExampleSentence]:
        if len(value) != 2:
            raise ValueError(f"expected exactly 2 examples, got {len(value)}")
        return value


__all__ = ["DictionaryEntry", "ExampleSentence", "GrammarData"]
