"""Core domain logic for the suggestion board."""

from .config import BoardConfig, FilterConfig, ModerationConfig, ServerConfig
from .filtering import WordFilter, contains_banned_word, normalize
from .models import Item, ItemStats, ItemView, ListOrdering, VoteType
from .services import (
    AlreadyVoted,
    Banned,
    BoardError,
    ContentRejected,
    InvalidInput,
    InvalidVote,
    NotFound,
    SuggestionBoardService,
)
from .storage import AbstractStorage, InMemoryStorage

__all__ = [
    "AbstractStorage",
    "AlreadyVoted",
    "Banned",
    "BoardConfig",
    "BoardError",
    "ContentRejected",
    "FilterConfig",
    "InMemoryStorage",
    "InvalidInput",
    "InvalidVote",
    "Item",
    "ItemStats",
    "ItemView",
    "ListOrdering",
    "ModerationConfig",
    "NotFound",
    "ServerConfig",
    "SuggestionBoardService",
    "VoteType",
    "WordFilter",
    "contains_banned_word",
    "normalize",
]
