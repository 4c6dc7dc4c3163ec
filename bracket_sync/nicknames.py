from __future__ import annotations

import re

import textdistance

from .models import Player

SIMILARITY_THRESHOLD = 0.8
RENAME_REASON = "Matching bracket name"
NICKNAME_MAX_LENGTH = 32

_WHITESPACE = re.compile(r"\s+")
_BIGRAM_DICE = textdistance.Sorensen(qval=2, external=False)


def similarity(first: str, second: str) -> float:
    """Sorensen-Dice coefficient over character bigrams, ignoring whitespace."""
    first = _WHITESPACE.sub("", first)
    second = _WHITESPACE.sub("", second)

    if first == second:
        return 1.0
    # no bigrams to compare
    if len(first) < 2 or len(second) < 2:
        return 0.0
    return float(_BIGRAM_DICE(first, second))


def name_scores(display_name: str, handle: str, full_handle: str) -> list[float]:
    display_name = display_name.lower()
    handle = handle.lower()
    return [
        similarity(handle, display_name),
        similarity(full_handle.lower(), display_name),
        1.0 if handle in display_name else 0.0,
    ]


def decide_nickname(player: Player) -> str | None:
    """Return the nickname a player should get, or None when theirs is close enough.

    A score must exceed the threshold; landing exactly on it still renames.
    """
    scores = name_scores(player.member.display_name, player.handle, player.full_handle)
    if any(score > SIMILARITY_THRESHOLD for score in scores):
        return None
    return player.full_handle
