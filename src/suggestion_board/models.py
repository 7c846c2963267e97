"""Domain models for the suggestion board."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class VoteType(str, Enum):
    AGREE = "agree"
    DISAGREE = "disagree"
    PASS = "pass"


class ListOrdering(str, Enum):
    """How a board orders its items when listed."""

    INSERTION = "insertion"
    TOTAL_VOTES = "total_votes"
    AGREEMENT = "agreement"


def _percent(count: int, total: int) -> int:
    # Round half up on integers so 0.5 never drifts to the even neighbour.
    if total <= 0:
        return 0
    return (count * 200 + total) // (2 * total)


@dataclass(slots=True, frozen=True)
class ItemStats:
    agree_count: int = 0
    disagree_count: int = 0
    pass_count: int = 0

    @classmethod
    def from_ledger(cls, votes: Dict[str, VoteType]) -> "ItemStats":
        values = list(votes.values())
        return cls(
            agree_count=values.count(VoteType.AGREE),
            disagree_count=values.count(VoteType.DISAGREE),
            pass_count=values.count(VoteType.PASS),
        )

    @property
    def total(self) -> int:
        return self.agree_count + self.disagree_count + self.pass_count

    @property
    def agree_pct(self) -> int:
        return _percent(self.agree_count, self.total)

    @property
    def disagree_pct(self) -> int:
        return _percent(self.disagree_count, self.total)

    def as_dict(self) -> dict:
        return {
            "agree": self.agree_pct,
            "disagree": self.disagree_pct,
            "agreeCount": self.agree_count,
            "disagreeCount": self.disagree_count,
            "passCount": self.pass_count,
            "total": self.total,
        }


@dataclass(slots=True)
class Item:
    text: str
    votes: Dict[str, VoteType] = field(default_factory=dict)

    @property
    def stats(self) -> ItemStats:
        return ItemStats.from_ledger(self.votes)

    def has_voted(self, identity: str) -> bool:
        return identity in self.votes

    def record_vote(self, identity: str, vote_type: VoteType) -> None:
        if identity in self.votes:
            raise ValueError("Identity has already voted on this item")
        self.votes[identity] = vote_type

    def remove_vote(self, identity: str) -> bool:
        return self.votes.pop(identity, None) is not None


@dataclass(slots=True, frozen=True)
class ItemView:
    """An item as returned by listings: its store index, text and tallies."""

    index: int
    text: str
    stats: ItemStats

    def as_dict(self) -> dict:
        return {"index": self.index, "text": self.text, **self.stats.as_dict()}
