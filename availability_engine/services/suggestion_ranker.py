# availability_engine/services/suggestion_ranker.py
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Sequence, Tuple

from availability_engine.services.quality_scorer import (
    DateSuggestion,
    Quality,
    quality_rank,
)


@dataclass(frozen=True)
class TierCounts:
    ideal: int = 0
    good: int = 0
    possible: int = 0

    @property
    def total(self) -> int:
        return self.ideal + self.good + self.possible

    @classmethod
    def of(cls, suggestions: Iterable[DateSuggestion]) -> "TierCounts":
        ideal = good = possible = 0
        for s in suggestions:
            if s.quality is Quality.IDEAL:
                ideal += 1
            elif s.quality is Quality.GOOD:
                good += 1
            elif s.quality is Quality.POSSIBLE:
                possible += 1
            else:
                raise ValueError(f"Unknown quality: {s.quality!r}")
        return cls(ideal=ideal, good=good, possible=possible)

    def as_dict(self) -> Dict[str, int]:
        return {"ideal": self.ideal, "good": self.good, "possible": self.possible}


@dataclass(frozen=True)
class RankedSuggestions:
    suggestions: Tuple[DateSuggestion, ...]
    counts: TierCounts
    dropped: int = 0


def sort_key(s: DateSuggestion) -> Tuple[int, date, int, int]:
    """Best tier first, then earliest date, then longest, then earliest start."""
    return quality_rank(s.quality), s.date, -s.slot.duration_minutes, s.slot.start


def dedupe(suggestions: Iterable[DateSuggestion]) -> List[DateSuggestion]:
    """
    Drop suggestions with the same (date, start, end); the best-ranked copy
    is the one kept. Output is sorted by sort_key.
    """
    seen = set()
    unique: List[DateSuggestion] = []
    for s in sorted(suggestions, key=sort_key):
        if s.slot.key in seen:
            continue
        seen.add(s.slot.key)
        unique.append(s)
    return unique


def truncate_preserving_tiers(
    ranked: Sequence[DateSuggestion],
    *,
    max_suggestions: int,
    min_ideal_reserved: int,
) -> List[DateSuggestion]:
    """
    Cap a sorted list to max_suggestions.

    min(ideal_count, min_ideal_reserved, max_suggestions) ideal suggestions
    always survive. The surplus is cut from the tail of POSSIBLE first, then
    GOOD, then IDEAL.
    """
    ideal_count = sum(1 for s in ranked if s.quality is Quality.IDEAL)
    reserved = min(ideal_count, min_ideal_reserved, max_suggestions)
    overflow = len(ranked) - max_suggestions
    if overflow <= 0:
        return list(ranked)

    tiers = {q: [s for s in ranked if s.quality is q] for q in Quality}
    floors = {Quality.IDEAL: reserved, Quality.GOOD: 0, Quality.POSSIBLE: 0}

    for tier in (Quality.POSSIBLE, Quality.GOOD, Quality.IDEAL):
        members = tiers[tier]
        drop = min(overflow, len(members) - floors[tier])
        if drop > 0:
            tiers[tier] = members[: len(members) - drop]
            overflow -= drop
        if overflow == 0:
            break

    return tiers[Quality.IDEAL] + tiers[Quality.GOOD] + tiers[Quality.POSSIBLE]


def rank_suggestions(
    suggestions: Iterable[DateSuggestion],
    *,
    max_suggestions: int,
    min_ideal_reserved: int,
) -> RankedSuggestions:
    ranked = dedupe(suggestions)
    kept = truncate_preserving_tiers(
        ranked,
        max_suggestions=max_suggestions,
        min_ideal_reserved=min_ideal_reserved,
    )
    return RankedSuggestions(
        suggestions=tuple(kept),
        counts=TierCounts.of(kept),
        dropped=len(ranked) - len(kept),
    )
