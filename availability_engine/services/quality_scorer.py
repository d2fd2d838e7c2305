# availability_engine/services/quality_scorer.py
import enum
from dataclasses import dataclass, replace
from datetime import date
from typing import Iterable, List, Sequence, Tuple

from availability_engine.schemas.suggestions import SuggestionConfig
from availability_engine.services.availability_model import (
    AvailabilityModel,
    DayOfWeek,
    TimeWindow,
    day_full_label,
)
from availability_engine.services.slot_intersector import MatchFlags, Slot


class Quality(str, enum.Enum):
    IDEAL = "ideal"
    GOOD = "good"
    POSSIBLE = "possible"


def quality_rank(quality: Quality) -> int:
    if quality is Quality.IDEAL:
        return 0
    if quality is Quality.GOOD:
        return 1
    if quality is Quality.POSSIBLE:
        return 2
    raise ValueError(f"Unknown quality: {quality!r}")


def quality_label(quality: Quality) -> str:
    if quality is Quality.IDEAL:
        return "Perfect"
    if quality is Quality.GOOD:
        return "Good"
    if quality is Quality.POSSIBLE:
        return "Possible"
    raise ValueError(f"Unknown quality: {quality!r}")


def quality_color(quality: Quality) -> str:
    if quality is Quality.IDEAL:
        return "#10B981"  # green
    if quality is Quality.GOOD:
        return "#3B82F6"  # blue
    if quality is Quality.POSSIBLE:
        return "#6B7280"  # gray
    raise ValueError(f"Unknown quality: {quality!r}")


class ReasonCode(str, enum.Enum):
    """Which rule of the decision table produced the tier."""

    BOTH_PREFERRED = "both_preferred"
    BOTH_PREFERRED_SHORT = "both_preferred_short"
    USER1_PREFERRED = "user1_preferred"
    USER2_PREFERRED = "user2_preferred"
    AMPLE_TIME = "ample_time"
    AVAILABLE = "available"


@dataclass(frozen=True)
class DateSuggestion:
    id: str
    date: date
    day_of_week: DayOfWeek
    slot: Slot
    quality: Quality
    reason: str
    reason_code: ReasonCode


def suggestion_id(slot: Slot) -> str:
    return "suggestion-{}-{:02d}{:02d}-{:02d}{:02d}".format(
        slot.date.isoformat(),
        *divmod(slot.start, 60),
        *divmod(slot.end, 60),
    )


def matches_bands(window: TimeWindow, bands: Sequence[TimeWindow]) -> bool:
    """A slot matches a band when it starts inside it; it may run past the band end."""
    return any(band.start <= window.start < band.end for band in bands)


def match_flags(slot: Slot, user1: AvailabilityModel, user2: AvailabilityModel) -> MatchFlags:
    window = slot.window
    return MatchFlags(
        user1=matches_bands(window, user1.preferences.bands),
        user2=matches_bands(window, user2.preferences.bands),
    )


def classify(
    flags: MatchFlags,
    duration_minutes: int,
    user1: AvailabilityModel,
    user2: AvailabilityModel,
    config: SuggestionConfig,
) -> Tuple[Quality, ReasonCode]:
    """
    Decision table, first match wins:

    IDEAL     both preferences match and the slot is at least as long as both
              participants' preferred minimum
    GOOD      both match but the slot is short of someone's minimum,
              exactly one matches,
              or neither matches but the slot beats the hard minimum by more
              than good_margin_minutes
    POSSIBLE  everything else
    """
    if flags.user1 and flags.user2:
        long_enough = duration_minutes >= max(
            user1.preferences.min_duration_minutes,
            user2.preferences.min_duration_minutes,
        )
        if long_enough:
            return Quality.IDEAL, ReasonCode.BOTH_PREFERRED
        return Quality.GOOD, ReasonCode.BOTH_PREFERRED_SHORT

    if flags.user1:
        return Quality.GOOD, ReasonCode.USER1_PREFERRED
    if flags.user2:
        return Quality.GOOD, ReasonCode.USER2_PREFERRED

    if duration_minutes > config.min_duration_minutes + config.good_margin_minutes:
        return Quality.GOOD, ReasonCode.AMPLE_TIME
    return Quality.POSSIBLE, ReasonCode.AVAILABLE


def shared_preferred_day(day: DayOfWeek, user1: AvailabilityModel, user2: AvailabilityModel) -> bool:
    return day in user1.preferences.preferred_days and day in user2.preferences.preferred_days


def build_reason(
    code: ReasonCode,
    *,
    duration_minutes: int,
    day: DayOfWeek,
    user1_name: str,
    user2_name: str,
    preferred_day: bool = False,
) -> str:
    if code is ReasonCode.BOTH_PREFERRED:
        reason = "Perfect match! Both of you prefer this time."
    elif code is ReasonCode.BOTH_PREFERRED_SHORT:
        reason = "Both of you prefer this time, though it is shorter than you'd like."
    elif code is ReasonCode.USER1_PREFERRED:
        reason = f"Matches {user1_name}'s preferred time and works for both schedules."
    elif code is ReasonCode.USER2_PREFERRED:
        reason = f"Matches {user2_name}'s preferred time and works for both schedules."
    elif code is ReasonCode.AMPLE_TIME:
        reason = "Outside your preferred times, but there is plenty of room."
    elif code is ReasonCode.AVAILABLE:
        reason = "Available time slot found."
    else:
        raise ValueError(f"Unknown reason code: {code!r}")

    if preferred_day:
        reason += f" {day_full_label(day)}s suit you both."

    if duration_minutes >= 180:
        reason += " Plenty of time for dinner and an activity!"
    elif duration_minutes >= 120:
        reason += " Great for dinner or an evening activity."

    return reason


def score_slot(
    slot: Slot,
    user1: AvailabilityModel,
    user2: AvailabilityModel,
    config: SuggestionConfig,
) -> DateSuggestion:
    flags = match_flags(slot, user1, user2)
    scored = replace(slot, matches_preferences=flags)
    quality, code = classify(flags, scored.duration_minutes, user1, user2, config)
    reason = build_reason(
        code,
        duration_minutes=scored.duration_minutes,
        day=scored.day_of_week,
        user1_name=user1.name,
        user2_name=user2.name,
        preferred_day=shared_preferred_day(scored.day_of_week, user1, user2),
    )
    return DateSuggestion(
        id=suggestion_id(scored),
        date=scored.date,
        day_of_week=scored.day_of_week,
        slot=scored,
        quality=quality,
        reason=reason,
        reason_code=code,
    )


def score_slots(
    slots: Iterable[Slot],
    user1: AvailabilityModel,
    user2: AvailabilityModel,
    config: SuggestionConfig,
) -> List[DateSuggestion]:
    return [score_slot(slot, user1, user2, config) for slot in slots]
