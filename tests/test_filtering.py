"""Tests for leet-aware normalization and banned-word matching."""

from __future__ import annotations

import re

import pytest

from suggestion_board.filtering import (
    WordFilter,
    build_substitutions,
    contains_banned_word,
    normalize,
)


def test_normalize_folds_leet_digits_to_letters() -> None:
    result = normalize("H3LL0")
    assert result == "hello"
    assert re.fullmatch(r"[a-z0-9\s]*", result)


@pytest.mark.parametrize("text", [None, ""])
def test_normalize_empty_input(text) -> None:
    assert normalize(text) == ""
    assert not contains_banned_word(text)


def test_normalize_replaces_unknown_symbols_with_spaces() -> None:
    assert normalize("hi~there") == "hi there"
    assert normalize("good * job") == "good   job"


def test_longer_substitutes_win_over_their_prefixes() -> None:
    # "13" is a "b"; without longest-first ordering it would become "ie".
    assert normalize("13ad") == "bad"


def test_shared_substitutes_resolve_to_first_letter_in_table() -> None:
    assert normalize("£") == "e"
    assert normalize("|") == "i"


def test_substitutions_are_sorted_longest_first() -> None:
    pairs = build_substitutions({"a": ["4"], "b": ["13"], "c": ["("]})
    assert pairs == (("13", "b"), ("4", "a"), ("(", "c"))


@pytest.mark.parametrize("text", ["$h1t", "5#17", "sh!t", "D@MN it", "dämn"])
def test_leet_spellings_of_banned_words_are_detected(text: str) -> None:
    assert contains_banned_word(text)


def test_banned_word_inside_longer_word_is_detected() -> None:
    assert contains_banned_word("mishitting the ball")


def test_clean_text_is_allowed() -> None:
    word_filter = WordFilter.from_iterable()
    assert not word_filter.contains_banned_word("More trees along Main Street")
    assert word_filter.find_banned_word("More trees along Main Street") is None


def test_custom_word_list_is_lowercased() -> None:
    word_filter = WordFilter.from_iterable(["Heck"])
    assert word_filter.contains_banned_word("what the h3ck")
    assert word_filter.find_banned_word("HECK no") == "heck"


def test_substring_matching_flags_embedded_words() -> None:
    word_filter = WordFilter.from_iterable(["hell"])
    assert word_filter.contains_banned_word("seashell collection")


def test_custom_leet_map() -> None:
    word_filter = WordFilter.from_iterable(["cat"], leet_map={"c": ["k"]})
    assert word_filter.contains_banned_word("kat")
    assert not word_filter.contains_banned_word("c4t")
