"""Prompt construction for dictionary illustrations."""

from __future__ import annotations

import random
from typing import Mapping, Optional, Sequence

from dictionary_factory.languages import language_name

from .style_templates import resolve_image_style

CULTURAL_BACKDROPS: Mapping[str, Sequence[str]] = {
    "nl": (
        "Amsterdam Canal Ring at twilight with illuminated gable houses",
        "Rijksmuseum with cyclists passing by in the foreground",
        "Modern Rotterdam skyline featuring the Erasmus Bridge and skyscrapers",
        "Yellow Cube Houses in Rotterdam against a blue sky",
        "Utrecht's Dom Tower overlooking the wharf cellars and canals",
        "The Binnenhof parliament buildings and Hofvijver lake in The Hague",
        "Delft Market Square with the New Church and historic City Hall",
        "Maastricht's Vrijthof square with old churches and outdoor terraces",
        "Leiden's Molen de Valk, a large stone windmill in the city center",
        "Groningen Museum's colorful modern architecture on the water",
        "Typical Dutch brick row houses with large windows and no curtains",
        "Haarlem Grote Markt with the massive St. Bavo Church",
        "Historic windmills at Kinderdijk lined up along the water at sunset",
        "Zaanse Schans with green wooden houses, small bridges and working windmills",
        "The Afsluitdijk causeway stretching across the sea",
        "Giethoorn village with thatched farmhouses, canals and small boats",
        "A white Dutch wooden drawbridge opening for a sailboat",
        "The Woudagemaal steam pumping station in a flat polder landscape",
        "Houseboats along a city canal with flower pots on deck",
        "The Delta Works storm surge barrier against the North Sea",
        "Tulip fields in Lisse in strips of red, yellow and pink",
        "Sand dunes along the North Sea coast with tall marram grass",
        "Purple heather in Hoge Veluwe National Park with a lone tree",
        "Texel's red lighthouse on a wide sandy beach",
        "Friesian cows grazing in a flat green meadow crossed by ditches",
        "A long straight dike road lined with tall trees and green fields",
        "Orchards in blossom in the Betuwe region in spring",
        "Sheep grazing on a green dike with the sea in the background",
        "A cozy brown cafe with a dark wooden interior and candles",
        "People cycling in the rain with umbrellas",
        "A multi-story bicycle parking garage near a central train station",
        "A street market selling wheels of Gouda cheese",
        "People eating raw herring at a street fish stall",
        "Ice skating on a frozen canal with koek-en-zopie stalls nearby",
        "A parent riding a bakfiets cargo bike with children and groceries",
        "People relaxing on a sunny terrace in a city square",
        "King's Day with orange decorations, clothes and canal boats",
        "A living room with very steep Dutch stairs visible",
        "Rotterdam Central Station's angular wood and steel architecture",
        "A multicultural street market with diverse food stalls",
        "Commuters on a busy train platform during rush hour",
        "Contemporary residential architecture in Almere or IJburg",
        "Students cycling to university in a historic town like Leiden",
        "A modern library converted from an old industrial building",
    ),
}

NO_TEXT_REQUIREMENT = (
    "STRICT REQUIREMENTS: STRICTLY NO TEXT. No letters, labels, captions, signs or "
    "speech bubbles. Pure visual art."
)


def choose_backdrop(
    target_language: str,
    rng: random.Random,
    *,
    cultural_hint: Optional[str] = None,
) -> str:
    """Return the cultural setting for an illustration.

    ``cultural_hint`` wins when given; otherwise a backdrop is drawn uniformly
    from the curated list for ``target_language`` using ``rng``.
    """

    if cultural_hint and cultural_hint.strip():
        return cultural_hint.strip()
    backdrops = CULTURAL_BACKDROPS.get(target_language)
    if not backdrops:
        return f"a typical {language_name(target_language)} cultural setting"
    return rng.choice(list(backdrops))


def build_image_prompt(
    *,
    term: str,
    context_sentence: str,
    style: str,
    backdrop: str,
    target_language: str,
) -> str:
    """Compose the final image prompt."""

    style_phrase = resolve_image_style(style).prompt_phrase
    atmosphere = language_name(target_language)
    if target_language == "nl":
        atmosphere = "the Netherlands"
    lines = [
        f'Create a {style_phrase} illustration of: "{context_sentence}". Key object: "{term}".',
        f"SETTING & CONTEXT: {backdrop}. Atmosphere: authentic {atmosphere}.",
        NO_TEXT_REQUIREMENT,
    ]
    return "\n".join(lines)


__all__ = [
    "CULTURAL_BACKDROPS",
    "NO_TEXT_REQUIREMENT",
    "build_image_prompt",
    "choose_backdrop",
]
