"""Content filtering utilities.

Submissions are normalized before matching: lowercased, look-alike characters
folded back to the letter they imitate ("$h1t" -> "shit"), and any remaining
symbol turned into a space. Banned words are then matched as plain substrings
of the normalized text, so a banned word hidden inside a longer word still
counts.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Sequence

from .config import DEFAULT_BANNED_WORDS, DEFAULT_LEET_MAP

_NON_ALNUM_RE = re.compile(r"[^a-z0-9\s]")


def build_substitutions(
    leet_map: Mapping[str, Sequence[str]],
) -> tuple[tuple[str, str], ...]:
    """Flatten a leet table into ``(substitute, base)`` pairs, longest first.

    ``sorted`` is stable, so substitutes of equal length keep table order.
    """

    pairs = [
        (substitute, base)
        for base, substitutes in leet_map.items()
        for substitute in substitutes
        if substitute
    ]
    return tuple(sorted(pairs, key=lambda pair: len(pair[0]), reverse=True))


_DEFAULT_SUBSTITUTIONS = build_substitutions(DEFAULT_LEET_MAP)


def normalize(
    text: str | None,
    substitutions: Sequence[tuple[str, str]] = _DEFAULT_SUBSTITUTIONS,
) -> str:
    normalized = (text or "").lower()
    for substitute, base in substitutions:
        normalized = normalized.replace(substitute, base)
    return _NON_ALNUM_RE.sub(" ", normalized)


@dataclass(slots=True)
class WordFilter:
    """Leet-aware substring filter over a fixed banned-word list."""

    banned_words: set[str]
    substitutions: tuple[tuple[str, str], ...] = field(default=_DEFAULT_SUBSTITUTIONS)

    @classmethod
    def from_iterable(
        cls,
        words: Iterable[str] = DEFAULT_BANNED_WORDS,
        leet_map: Mapping[str, Sequence[str]] | None = None,
    ) -> "WordFilter":
        substitutions = (
            build_substitutions(leet_map) if leet_map is not None else _DEFAULT_SUBSTITUTIONS
        )
        return cls({word.lower() for word in words if word}, substitutions)

    def normalize(self, text: str | None) -> str:
        return normalize(text, self.substitutions)

    def find_banned_word(self, text: str | None) -> str | None:
        normalized = self.normalize(text)
        for word in sorted(self.banned_words):
            if word in normalized:
                return word
        return None

    def contains_banned_word(self, text: str | None) -> bool:
        return self.find_banned_word(text) is not None


_DEFAULT_FILTER = WordFilter.from_iterable()


def contains_banned_word(text: str | None) -> bool:
    return _DEFAULT_FILTER.contains_banned_word(text)
