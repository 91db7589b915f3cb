"""Age-based eviction scoring."""

from __future__ import annotations

from convwindow.window.types import Message

# Fraction of one per-index step subtracted from summary entries.
# Must stay below 1.0 so positional order is never inverted.
SUMMARY_PENALTY_FRACTION = 0.5


def age_score(index: int, total: int, message: Message | None = None) -> float:
    """Return the eviction priority of ``message`` at ``index`` of ``total``.

    The oldest entry scores 1.0 and the newest 0.0. Entries already marked
    as conversation summaries are nudged down by half a step, so among
    messages of different ages the older one always scores higher.
    """
    if total < 1:
        raise ValueError(f"total must be >= 1, got {total}")
    if not 0 <= index < total:
        raise ValueError(f"index {index} out of range for total {total}")

    step = 1.0 / max(total - 1, 1)
    score = (total - 1 - index) * step
    if message is not None and message.is_summary:
        score -= step * SUMMARY_PENALTY_FRACTION
    return score


def score_messages(messages: list[Message]) -> list[float]:
    total = len(messages)
    return [age_score(i, total, m) for i, m in enumerate(messages)]


def rank_for_eviction(messages: list[Message]) -> list[int]:
    """Indices ordered from first-to-evict to last, ties going to the earlier index."""
    scores = score_messages(messages)
    return sorted(range(len(messages)), key=lambda i: (-scores[i], i))
