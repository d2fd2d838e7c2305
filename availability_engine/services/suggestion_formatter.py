# availability_engine/services/suggestion_formatter.py
from datetime import date
from typing import Dict, List, Sequence

from availability_engine.schemas.suggestions import (
    DateSuggestionOut,
    MatchFlagsOut,
    SuggestionResponse,
    TierCountsOut,
)
from availability_engine.services.availability_model import day_label, is_weekend
from availability_engine.services.quality_scorer import (
    DateSuggestion,
    Quality,
    quality_color,
    quality_label,
)
from availability_engine.services.suggestion_service import SuggestionResult


def format_hhmm(minutes: int) -> str:
    return "{:02d}:{:02d}".format(*divmod(minutes, 60))


def format_clock(minutes: int) -> str:
    """Minutes since midnight -> "6:30 PM". 1440 reads as midnight."""
    hours, mins = divmod(minutes % (24 * 60), 60)
    period = "PM" if hours >= 12 else "AM"
    display_hours = hours % 12 or 12
    return f"{display_hours}:{mins:02d} {period}"


def format_time_range(start: int, end: int) -> str:
    return f"{format_clock(start)} - {format_clock(end)}"


def format_duration(minutes: int) -> str:
    if minutes < 60:
        return f"{minutes}min"
    hours, mins = divmod(minutes, 60)
    return f"{hours}h {mins}m" if mins else f"{hours}h"


def format_date_display(d: date) -> str:
    """e.g. "Fri, Oct 17" """
    return f"{d.strftime('%a, %b')} {d.day}"


def to_display_record(suggestion: DateSuggestion) -> DateSuggestionOut:
    slot = suggestion.slot
    return DateSuggestionOut(
        id=suggestion.id,
        date=suggestion.date,
        day_of_week=int(suggestion.day_of_week),
        day_label=day_label(suggestion.day_of_week),
        date_display=format_date_display(suggestion.date),
        is_weekend=is_weekend(suggestion.day_of_week),
        start=format_hhmm(slot.start),
        end=format_hhmm(slot.end),
        time_range=format_time_range(slot.start, slot.end),
        duration_minutes=slot.duration_minutes,
        duration_label=format_duration(slot.duration_minutes),
        quality=suggestion.quality.value,
        quality_label=quality_label(suggestion.quality),
        quality_color=quality_color(suggestion.quality),
        reason=suggestion.reason,
        reason_code=suggestion.reason_code.value,
        matches_preferences=MatchFlagsOut(
            user1=slot.matches_preferences.user1,
            user2=slot.matches_preferences.user2,
        ),
    )


def group_by_quality(records: Sequence[DateSuggestionOut]) -> Dict[str, List[DateSuggestionOut]]:
    """Every tier is present, in IDEAL, GOOD, POSSIBLE order."""
    groups: Dict[str, List[DateSuggestionOut]] = {q.value: [] for q in Quality}
    for record in records:
        groups[record.quality].append(record)
    return groups


def format_result(result: SuggestionResult) -> SuggestionResponse:
    """Response body consumed by the UI layer."""
    records = [to_display_record(s) for s in result.suggestions]
    return SuggestionResponse(
        outcome=result.outcome.value,
        counts=TierCountsOut(**result.counts.as_dict()),
        candidate_count=result.candidate_count,
        suggestions=records,
        groups=group_by_quality(records),
    )
