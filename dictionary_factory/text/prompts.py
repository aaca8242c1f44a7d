"""Prompt templates for dictionary entry generation."""

from __future__ import annotations

from typing import Dict, List, Optional

from dictionary_factory.languages import language_name

INVALID_TERM_SENTINEL = "INVALID_TERM"

TERM_START = "<<<BEGIN_TERM>>>"
TERM_END = "<<<END_TERM>>>"

# Part-of-speech abbreviations the entry should use, keyed by target language.
_PART_OF_SPEECH_HINTS = {
    "nl": "zn. (noun), ww. (verb), bn. (adjective), bw. (adverb)",
    "de": "Subst. (noun), Verb (verb), Adj. (adjective), Adv. (adverb)",
    "fr": "n. (noun), v. (verb), adj. (adjective), adv. (adverb)",
    "es": "s. (noun), v. (verb), adj. (adjective), adv. (adverb)",
}

_ARTICLE_HINTS = {
    "nl": '"de" or "het"',
    "de": '"der", "die" or "das"',
    "fr": '"le", "la" or "l\'"',
    "es": '"el" or "la"',
}


def make_entry_prompt(term: str, source_language: str, target_language: str) -> str:
    """Build the instruction text for a single dictionary entry."""

    source = language_name(source_language)
    target = language_name(target_language)
    pos_hint = _PART_OF_SPEECH_HINTS.get(
        target_language, f"the usual {target} dictionary abbreviations"
    )
    article_hint = _ARTICLE_HINTS.get(target_language, "the definite article, if the language has one")

    instructions = [
        f"You are a lexicographer writing a {target} learner's dictionary for {source} speakers.",
        "The headword is the text between the term markers on the next line.",
        f"{TERM_START}{term}{TERM_END}",
        "",
        "VALIDATION:",
        f"If the headword is not a real {target} word, or is misspelled, return exactly "
        f'"{INVALID_TERM_SENTINEL}" as the definition and leave every other field empty.',
        "",
        "FIELDS:",
        f"- definition: a concise {source} definition of at most 15 words.",
        f"- partOfSpeech: in {target}, using {pos_hint}. Do not translate it.",
        f"- grammar_data: all values in {target}, never translated:",
        f"    plural (nouns), article ({article_hint}),",
        '    verbForms as "present - past - past participle" (verbs),',
        '    adjectiveForms as "base - comparative - superlative" (adjectives),',
        "    synonyms and antonyms (at most 3 each).",
        f"- usageNote: {source} explanation of nuance, register or common mistakes, 60-70 words at most.",
        f"- examples: exactly 2 items, each with a natural {target} sentence in 'target'",
        f"  and its {source} translation in 'translation'.",
        "",
        "Respond with a single JSON object and no commentary.",
    ]
    return "\n".join(instructions)


def make_chat_payload(
    prompt: str,
    *,
    model: str,
    system_prompt: Optional[str] = None,
    json_mode: bool = True,
) -> Dict[str, object]:
    """Build a chat-completions payload for ``prompt``."""

    messages: List[Dict[str, str]] = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})
    messages.append({"role": "user", "content": prompt})

    payload: Dict[str, object] = {"model": model, "messages": messages, "stream": False}
    if json_mode:
        payload["response_format"] = {"type": "json_object"}
    return payload


__all__ = [
    "INVALID_TERM_SENTINEL",
    "make_chat_payload",
    "make_entry_prompt",
]
