"""Dictionary entry generation."""

from .generator import TextContentGenerator, parse_entry
from .models import DictionaryEntry, ExampleSentence, GrammarData
from .prompts import INVALID_TERM_SENTINEL, make_entry_prompt
from .providers import ChatTextProvider, GeminiTextProvider, TextProvider

__all__ = [
    "ChatTextProvider",
    "DictionaryEntry",
    "ExampleSentence",
    "GeminiTextProvider",
    "GrammarData",
    "INVALID_TERM_SENTINEL",
    "TextContentGenerator",
    "TextProvider",
    "make_entry_prompt",
    "parse_entry",
]
