# availability_engine/services/suggestion_service.py
import enum
import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple

from availability_engine.schemas.availability import ParticipantAvailabilityIn
from availability_engine.schemas.suggestions import SuggestionConfig
from availability_engine.services.availability_model import (
    AvailabilityModel,
    DateRange,
    validate_date_range,
)
from availability_engine.services.participant_service import availability_from_payload
from availability_engine.services.quality_scorer import DateSuggestion, score_slots
from availability_engine.services.slot_intersector import find_candidate_slots
from availability_engine.services.suggestion_ranker import TierCounts, rank_suggestions

logger = logging.getLogger(__name__)


class Outcome(str, enum.Enum):
    SUGGESTIONS = "suggestions"
    NO_OVERLAP = "no_overlap"


@dataclass(frozen=True)
class SuggestionResult:
    suggestions: Tuple[DateSuggestion, ...]
    counts: TierCounts
    candidate_count: int
    outcome: Outcome

    @property
    def no_overlap(self) -> bool:
        return self.outcome is Outcome.NO_OVERLAP


def suggest_dates(
    user1: AvailabilityModel,
    user2: AvailabilityModel,
    date_range: DateRange,
    config: Optional[SuggestionConfig] = None,
) -> SuggestionResult:
    """
    Intersect → score → rank.

    Pure: nothing is read from or written to storage, and identical inputs
    give an identical ordered result. Raises InvalidDateRange before any
    slot work when the range is reversed or longer than config.max_range_days.
    An empty intersection is a NO_OVERLAP result, not an error.
    """
    config = config or SuggestionConfig()
    date_range = validate_date_range(date_range.start, date_range.end, config.max_range_days)

    slots = find_candidate_slots(user1, user2, date_range, config)
    scored = score_slots(slots, user1, user2, config)
    ranked = rank_suggestions(
        scored,
        max_suggestions=config.max_suggestions,
        min_ideal_reserved=config.min_ideal_reserved,
    )

    outcome = Outcome.SUGGESTIONS if ranked.suggestions else Outcome.NO_OVERLAP
    logger.info(
        "suggest_dates %s+%s %s..%s: %d candidate(s), kept %d (ideal=%d good=%d possible=%d)",
        user1.name,
        user2.name,
        date_range.start.isoformat(),
        date_range.end.isoformat(),
        len(slots),
        ranked.counts.total,
        ranked.counts.ideal,
        ranked.counts.good,
        ranked.counts.possible,
    )

    return SuggestionResult(
        suggestions=ranked.suggestions,
        counts=ranked.counts,
        candidate_count=len(slots),
        outcome=outcome,
    )


def suggest_dates_from_payload(
    user1: ParticipantAvailabilityIn,
    user2: ParticipantAvailabilityIn,
    start: date,
    end: date,
    config: Optional[SuggestionConfig] = None,
) -> SuggestionResult:
    """
    Validate both raw payloads, then run suggest_dates, which checks the range.

    Every input is checked before the first intersection, so a bad window
    never yields a partial list.
    """
    config = config or SuggestionConfig()
    model1 = availability_from_payload(user1, default_name="user1")
    model2 = availability_from_payload(user2, default_name="user2")
    return suggest_dates(model1, model2, DateRange(start, end), config)
