"""Configuration objects for the suggestion board."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Dict, Iterable

from .models import ListOrdering, VoteType

LOGGER = logging.getLogger(__name__)

DEFAULT_BANNED_WORDS: tuple[str, ...] = ("shit", "damn", "badword1", "badword2")

# Base letter -> look-alike substitutes. Order matters for substitutes shared
# by several letters ("1", "|", "£"): the earlier letter wins.
DEFAULT_LEET_MAP: Dict[str, tuple[str, ...]] = {
    "a": ("4", "@", "ä", "á", "à", "â", "ª"),
    "b": ("8", "ß", "13"),
    "c": ("(", "{", "[", "<", "¢"),
    "e": ("3", "€", "£", "ë", "ê", "è", "é"),
    "g": ("9", "6"),
    "h": ("#",),
    "i": ("1", "!", "|", "í", "ì", "ï", "î"),
    "l": ("1", "|", "£"),
    "o": ("0", "°", "ø", "ö", "ó", "ò", "ô"),
    "s": ("$", "5", "§"),
    "t": ("7", "+"),
    "u": ("ü", "ú", "ù", "û", "v"),
    "z": ("2", "ž"),
}

IDEAS_SEED: tuple[str, ...] = (
    "Safe bike routes to schools, groceries, and work; not just recreational greenways",
    "Littleton should not have any bike lanes unless they are warranted",
)

FOOD_SEED: tuple[str, ...] = (
    "Angelo's Taverna - Littleton",
    "ViewHouse",
    "Smokin Fins - Littleton",
    "Manning's Steaks & Spirits",
    "Farm House Restaurant at Breckenridge Brewery",
    "Grande Station",
    "Cafe Terracotta",
    "Ninja Sushi",
)


def _parse_int_env(name: str) -> int | None:
    raw = os.environ.get(name)
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        LOGGER.warning("Environment variable %s must be an integer (got %r)", name, raw)
        return None


def _parse_list_env(name: str) -> list[str]:
    raw = os.environ.get(name)
    if not raw:
        return []
    return [chunk.strip() for chunk in raw.split(",") if chunk.strip()]


@dataclass(slots=True)
class FilterConfig:
    """Configures the profanity filter for submissions."""

    banned_words: set[str] = field(default_factory=lambda: set(DEFAULT_BANNED_WORDS))
    leet_map: Dict[str, tuple[str, ...]] = field(
        default_factory=lambda: dict(DEFAULT_LEET_MAP)
    )

    def extend(self, words: Iterable[str]) -> None:
        self.banned_words.update(word.lower() for word in words if word)


@dataclass(slots=True)
class ModerationConfig:
    """Controls how long offending identities are kept from submitting."""

    ban_duration: timedelta = timedelta(minutes=10)

    def __post_init__(self) -> None:
        if self.ban_duration <= timedelta(0):
            raise ValueError("Ban duration must be positive")


@dataclass(slots=True)
class BoardConfig:
    """Describes one board: its seed items, vote types and list ordering."""

    name: str
    ordering: ListOrdering = ListOrdering.INSERTION
    vote_types: frozenset[VoteType] = frozenset(VoteType)
    seed: tuple[str, ...] = ()
    item_label: str = "idea"


@dataclass(slots=True)
class ServerConfig:
    """Process level settings for the HTTP request layer."""

    host: str = "0.0.0.0"
    port: int = 3000
    admin_token: str | None = None
    filter_config: FilterConfig = field(default_factory=FilterConfig)
    moderation: ModerationConfig = field(default_factory=ModerationConfig)
    boards: tuple[BoardConfig, ...] = field(default_factory=lambda: default_boards())

    @classmethod
    def from_env(cls) -> "ServerConfig":
        config = cls()
        config.host = os.environ.get("HOST") or config.host
        port = _parse_int_env("PORT")
        if port is not None:
            config.port = port
        config.admin_token = os.environ.get("BOARD_ADMIN_TOKEN") or None

        ban_minutes = _parse_int_env("BAN_MINUTES")
        if ban_minutes is not None:
            if ban_minutes <= 0:
                LOGGER.warning("BAN_MINUTES must be positive, got %s", ban_minutes)
            else:
                config.moderation = ModerationConfig(ban_duration=timedelta(minutes=ban_minutes))

        config.filter_config.extend(_parse_list_env("BANNED_WORDS"))
        return config


def default_boards() -> tuple[BoardConfig, ...]:
    return (
        BoardConfig(name="ideas", seed=IDEAS_SEED, item_label="idea"),
        BoardConfig(
            name="food",
            ordering=ListOrdering.TOTAL_VOTES,
            seed=FOOD_SEED,
            item_label="suggestion",
        ),
    )
