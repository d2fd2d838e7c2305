# availability_engine/services/slot_intersector.py
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Sequence, Tuple

from availability_engine.schemas.suggestions import CuttingPolicy, SuggestionConfig
from availability_engine.services.availability_model import (
    AvailabilityModel,
    DateRange,
    DayOfWeek,
    TimeWindow,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchFlags:
    user1: bool = False
    user2: bool = False


@dataclass(frozen=True)
class Slot:
    date: date
    day_of_week: DayOfWeek
    start: int
    end: int
    matches_preferences: MatchFlags = field(default_factory=MatchFlags)

    @property
    def duration_minutes(self) -> int:
        return self.end - self.start

    @property
    def window(self) -> TimeWindow:
        return TimeWindow(self.start, self.end)

    @property
    def key(self) -> Tuple[date, int, int]:
        return self.date, self.start, self.end


def intersect_windows(
    first: Sequence[TimeWindow],
    second: Sequence[TimeWindow],
) -> List[TimeWindow]:
    """
    Two-pointer sweep over two sorted, disjoint window lists.

    Whichever window ends first can't overlap anything further in the other
    list, so it is the one we advance past. O(len(first) + len(second)).
    """
    overlaps: List[TimeWindow] = []
    i = j = 0
    while i < len(first) and j < len(second):
        a, b = first[i], second[j]
        start = max(a.start, b.start)
        end = min(a.end, b.end)
        if start < end:
            overlaps.append(TimeWindow(start, end))

        if a.end < b.end:
            i += 1
        else:
            j += 1
    return overlaps


def effective_max_duration(
    user1: AvailabilityModel,
    user2: AvailabilityModel,
    config: SuggestionConfig,
) -> Optional[int]:
    """
    Longest slot we hand out before cutting, or None for "never cut".

    An overlap has to exceed *each* participant's maximum to be cut, so the
    larger of the two maxima applies; config.max_duration_minutes is a hard
    ceiling on top. Never below config.min_duration_minutes, otherwise every
    cut piece would be filtered out again.
    """
    limits = [
        p.max_duration_minutes
        for p in (user1.preferences, user2.preferences)
        if p.max_duration_minutes is not None
    ]
    cap = max(limits) if limits else None

    if config.max_duration_minutes is not None:
        cap = config.max_duration_minutes if cap is None else min(cap, config.max_duration_minutes)

    if cap is None:
        return None
    return max(cap, config.min_duration_minutes)


def cut_overlap(
    overlap: TimeWindow,
    *,
    max_minutes: Optional[int],
    min_minutes: int,
    policy: CuttingPolicy,
    bands: Sequence[TimeWindow] = (),
) -> List[TimeWindow]:
    """
    Turn one surviving overlap into candidate windows.

    BAND_ANCHORED: one piece per preference band touching the overlap,
                   starting at max(band.start, overlap.start); a single piece
                   at the overlap start when no band touches it.
                   Falls back to the overlap start when every anchored
                   piece would be too short. An overlap that needs no
                   cutting is kept whole, plus one piece from the start of
                   every band that begins inside it.
    SINGLE:        one piece at the overlap start.
    FIXED_LENGTH:  back-to-back pieces from the overlap start.

    Pieces are at most max_minutes long, never leave the overlap, and pieces
    shorter than min_minutes are dropped.
    """
    if max_minutes is None or overlap.duration_minutes <= max_minutes:
        if policy is not CuttingPolicy.BAND_ANCHORED:
            return [overlap]
        pieces = [overlap] + [
            TimeWindow(b.start, overlap.end)
            for b in bands
            if overlap.start < b.start < overlap.end
        ]
    elif policy is CuttingPolicy.BAND_ANCHORED:
        anchors = sorted({max(b.start, overlap.start) for b in bands if b.overlaps(overlap)})
        if not anchors:
            anchors = [overlap.start]
        pieces = [TimeWindow(a, min(a + max_minutes, overlap.end)) for a in anchors]
    elif policy is CuttingPolicy.SINGLE:
        pieces = [TimeWindow(overlap.start, overlap.start + max_minutes)]
    elif policy is CuttingPolicy.FIXED_LENGTH:
        pieces = []
        t = overlap.start
        while t < overlap.end:
            pieces.append(TimeWindow(t, min(t + max_minutes, overlap.end)))
            t += max_minutes
    else:
        raise ValueError(f"Unsupported cutting policy: {policy!r}")

    result: List[TimeWindow] = []
    for piece in pieces:
        if piece.duration_minutes >= min_minutes and piece not in result:
            result.append(piece)

    # every anchor sat too close to the overlap end
    if not result and policy is CuttingPolicy.BAND_ANCHORED and max_minutes is not None:
        result.append(TimeWindow(overlap.start, overlap.start + max_minutes))
    return result


def find_candidate_slots(
    user1: AvailabilityModel,
    user2: AvailabilityModel,
    date_range: DateRange,
    config: SuggestionConfig,
) -> List[Slot]:
    """
    Intersect both participants' weekly windows for every date in the range.

    Overlaps shorter than config.min_duration_minutes are discarded; longer
    ones go through the configured cutting policy. Slots come out in date
    order, then by start within a date. Match flags are left for the scorer.
    """
    max_minutes = effective_max_duration(user1, user2, config)
    bands = sorted(set(user1.preferences.bands) | set(user2.preferences.bands))

    slots: List[Slot] = []
    for day in date_range.days():
        dow = DayOfWeek.for_date(day)
        overlaps = intersect_windows(user1.windows_for(dow), user2.windows_for(dow))

        kept = 0
        for overlap in overlaps:
            if overlap.duration_minutes < config.min_duration_minutes:
                continue
            for piece in cut_overlap(
                overlap,
                max_minutes=max_minutes,
                min_minutes=config.min_duration_minutes,
                policy=config.cutting_policy,
                bands=bands,
            ):
                slots.append(Slot(date=day, day_of_week=dow, start=piece.start, end=piece.end))
                kept += 1

        if overlaps:
            logger.debug(
                "%s (%s): %d overlap(s), %d candidate slot(s)",
                day.isoformat(),
                dow.name,
                len(overlaps),
                kept,
            )

    return slots
