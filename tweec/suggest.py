# tweec/suggest.py
"""
Suggestion heuristics for the two warnings that can be corrected
automatically.

dead-link
    The target is compared with every known passage name using the
    Jaro–Winkler similarity; the closest name scoring above
    :data:`SIMILARITY_THRESHOLD` is offered.

whitespace-in-link
    The link target is located inside ``[[...]]`` and a copy of the link
    with the target trimmed is offered.

Both return the note text, or ``None`` when there is nothing to say.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

import jellyfish

SIMILARITY_THRESHOLD: float = 0.8


def did_you_mean(value: str, possible_values: Iterable[str]) -> List[str]:
    """
    Candidates similar to *value*, most similar first.

    Only candidates with a similarity strictly above
    :data:`SIMILARITY_THRESHOLD` are returned.  Equal scores keep their
    input order.
    """
    scored: List[Tuple[float, str]] = []
    for candidate in possible_values:
        score = jellyfish.jaro_winkler_similarity(value, candidate)
        if score > SIMILARITY_THRESHOLD:
            scored.append((score, candidate))
    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [candidate for _, candidate in scored]


def dead_link_note(target: str, passage_names: Optional[Iterable[str]]) -> Optional[str]:
    if passage_names is None:
        return None
    matches = did_you_mean(target, passage_names)
    if not matches:
        return None
    return f'Found passage with similar name: "{matches[0]}"'


def link_target(contents: str) -> str:
    """
    The target part of link *contents* (the text between ``[[`` and ``]]``).

    ``text|Target`` wins over ``Target<-text`` which wins over
    ``text->Target``; plain ``[[Target]]`` is its own target.
    """
    if "|" in contents:
        return contents.split("|", 1)[1]
    if "<-" in contents:
        return contents.split("<-", 1)[0]
    if "->" in contents:
        return contents.split("->", 1)[1]
    return contents


def repair_link(link: str) -> str:
    """*link* with surrounding whitespace removed from its target."""
    target = link_target(link[2:-2])
    return link.replace(target, target.strip(), 1)


def whitespace_link_note(link: str) -> Optional[str]:
    if len(link) < 4:
        return None
    return f"Try replacing {link} with {repair_link(link)}"


__all__ = [
    "SIMILARITY_THRESHOLD",
    "did_you_mean",
    "dead_link_note",
    "link_target",
    "repair_link",
    "whitespace_link_note",
]
