"""Core services implementing the board's moderation and voting rules."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Optional

from .config import BoardConfig, FilterConfig, ModerationConfig
from .filtering import WordFilter
from .models import Item, ItemStats, ItemView, ListOrdering, VoteType, utcnow
from .storage import AbstractStorage, InMemoryStorage

LOGGER = logging.getLogger(__name__)


class BoardError(ValueError):
    """Base class for rejected board requests; ``status`` is the HTTP code."""

    status: int = 400
    default_message: str = "Request rejected"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self.args[0])


class Banned(BoardError):
    status = 403
    default_message = "You are temporarily banned for submitting inappropriate content."

    def __init__(self, expires_at: datetime, remaining: timedelta) -> None:
        super().__init__()
        self.expires_at = expires_at
        self.remaining = remaining


class InvalidInput(BoardError):
    status = 400
    default_message = "Invalid submission"


class ContentRejected(BoardError):
    status = 403

    def __init__(self, expires_at: datetime, ban_duration: timedelta) -> None:
        minutes = max(1, int(ban_duration.total_seconds() // 60))
        unit = "minute" if minutes == 1 else "minutes"
        super().__init__(
            f"Inappropriate content detected. You are banned for {minutes} {unit}."
        )
        self.expires_at = expires_at


class InvalidVote(BoardError):
    status = 400
    default_message = "Invalid vote"


class NotFound(BoardError, LookupError):
    status = 404
    default_message = "Item not found"


class AlreadyVoted(BoardError):
    status = 409
    default_message = "Already voted"


def _sort_views(views: list[ItemView], ordering: ListOrdering) -> list[ItemView]:
    if ordering is ListOrdering.TOTAL_VOTES:
        return sorted(views, key=lambda view: (-view.stats.total, view.index))
    if ordering is ListOrdering.AGREEMENT:
        return sorted(
            views,
            key=lambda view: (
                -view.stats.agree_count,
                view.stats.disagree_count,
                view.text,
                view.index,
            ),
        )
    return views


@dataclass(slots=True)
class SuggestionBoardService:
    board: BoardConfig
    storage: AbstractStorage | None = None
    filter_config: FilterConfig = field(default_factory=FilterConfig)
    moderation: ModerationConfig = field(default_factory=ModerationConfig)
    clock: Callable[[], datetime] = utcnow
    word_filter: WordFilter | None = None
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.storage is None:
            self.storage = InMemoryStorage(self.board.seed)
        if self.word_filter is None:
            self.word_filter = WordFilter.from_iterable(
                self.filter_config.banned_words, self.filter_config.leet_map
            )

    # Moderation ----------------------------------------------------------

    def ban_status(self, identity: str) -> Optional[datetime]:
        """Return the active ban expiry for ``identity``, or ``None``."""

        with self._lock:
            expires_at = self.storage.get_ban_expiry(identity)
            if expires_at is not None and self.clock() < expires_at:
                return expires_at
        return None

    def submit(self, identity: str, text: object) -> Item:
        with self._lock:
            now = self.clock()
            expires_at = self.storage.get_ban_expiry(identity)
            if expires_at is not None and now < expires_at:
                LOGGER.info("Rejected submission from banned identity %s", identity)
                raise Banned(expires_at, expires_at - now)

            invalid_message = f"Invalid {self.board.item_label}"
            if not isinstance(text, str) or not text.strip():
                raise InvalidInput(invalid_message)
            cleaned = text.strip()

            matched = self.word_filter.find_banned_word(text)
            if matched is not None:
                expires_at = now + self.moderation.ban_duration
                self.storage.save_ban(identity, expires_at)
                LOGGER.warning(
                    "Banned %s on board %s until %s for filtered content (%r)",
                    identity,
                    self.board.name,
                    expires_at.isoformat(),
                    matched,
                )
                raise ContentRejected(expires_at, self.moderation.ban_duration)

            item = Item(text=cleaned)
            index = self.storage.add_item(item)
            LOGGER.info("Accepted %s #%s on board %s", self.board.item_label, index, self.board.name)
            return item

    # Voting --------------------------------------------------------------

    def _parse_vote_type(self, vote_type: object) -> VoteType:
        if isinstance(vote_type, VoteType):
            parsed = vote_type
        elif isinstance(vote_type, str):
            try:
                parsed = VoteType(vote_type)
            except ValueError:
                raise InvalidVote() from None
        else:
            raise InvalidVote()
        if parsed not in self.board.vote_types:
            raise InvalidVote()
        return parsed

    def vote(self, identity: str, index: object, vote_type: object) -> ItemStats:
        if isinstance(index, bool) or not isinstance(index, int):
            raise InvalidVote()
        parsed = self._parse_vote_type(vote_type)
        with self._lock:
            item = self.storage.get_item(index)
            if item is None:
                raise NotFound(f"{self.board.item_label.capitalize()} not found")
            if item.has_voted(identity):
                LOGGER.debug("Duplicate vote from %s on #%s", identity, index)
                raise AlreadyVoted()
            item.record_vote(identity, parsed)
            self.storage.save_item(index, item)
            return item.stats

    def list_items(self) -> list[ItemView]:
        with self._lock:
            views = [
                ItemView(index=index, text=item.text, stats=item.stats)
                for index, item in enumerate(self.storage.list_items())
            ]
        return _sort_views(views, self.board.ordering)

    def get_stats(self, index: int) -> ItemStats:
        with self._lock:
            item = self.storage.get_item(index)
        if item is None:
            raise NotFound(f"{self.board.item_label.capitalize()} not found")
        return item.stats

    def reset_personal(self, identity: str) -> int:
        removed = 0
        with self._lock:
            for index, item in enumerate(self.storage.list_items()):
                if item.remove_vote(identity):
                    self.storage.save_item(index, item)
                    removed += 1
        if removed:
            LOGGER.info("Cleared %s votes for %s on board %s", removed, identity, self.board.name)
        return removed

    def reset_all(self) -> None:
        with self._lock:
            for index, item in enumerate(self.storage.list_items()):
                if item.votes:
                    item.votes.clear()
                    self.storage.save_item(index, item)
        LOGGER.info("Cleared all votes on board %s", self.board.name)
