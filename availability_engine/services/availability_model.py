# availability_engine/services/availability_model.py
import enum
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import (
    Any,
    FrozenSet,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Tuple,
)

from availability_engine.services.errors import (
    InvalidDateRange,
    InvalidPreferences,
    InvalidWindow,
)

MINUTES_PER_DAY = 24 * 60


class DayOfWeek(int, enum.Enum):
    """0=MONDAY ... 6=SUNDAY, same numbering as date.weekday()."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @classmethod
    def for_date(cls, d: date) -> "DayOfWeek":
        return cls(d.weekday())


def day_label(day: DayOfWeek) -> str:
    return day.name[:3].title()


def day_full_label(day: DayOfWeek) -> str:
    return day.name.title()


def is_weekend(day: DayOfWeek) -> bool:
    return day in (DayOfWeek.SATURDAY, DayOfWeek.SUNDAY)


@dataclass(frozen=True, order=True)
class TimeWindow:
    """Half-open [start, end) in minutes since midnight."""

    start: int
    end: int

    @property
    def duration_minutes(self) -> int:
        return self.end - self.start

    def contains(self, other: "TimeWindow") -> bool:
        return self.start <= other.start and other.end <= self.end

    def overlaps(self, other: "TimeWindow") -> bool:
        return self.start < other.end and other.start < self.end


class TimeOfDay(str, enum.Enum):
    MORNING = "MORNING"
    AFTERNOON = "AFTERNOON"
    EVENING = "EVENING"


def time_of_day_window(tod: TimeOfDay) -> TimeWindow:
    """
    Named preference bands.

    MORNING:    06:00–12:00
    AFTERNOON:  12:00–17:00
    EVENING:    17:00–22:00
    """
    if tod is TimeOfDay.MORNING:
        return TimeWindow(6 * 60, 12 * 60)
    if tod is TimeOfDay.AFTERNOON:
        return TimeWindow(12 * 60, 17 * 60)
    if tod is TimeOfDay.EVENING:
        return TimeWindow(17 * 60, 22 * 60)
    raise ValueError(f"Unknown time of day: {tod!r}")


def parse_clock(value: str) -> int:
    """
    "HH:MM" -> minutes since midnight. "24:00" is accepted as end of day.
    """
    try:
        hours_str, minutes_str = value.strip().split(":")
        hours, minutes = int(hours_str), int(minutes_str)
    except (AttributeError, ValueError) as e:
        raise ValueError(f"Time must be formatted as HH:MM, got {value!r}") from e

    if not (0 <= minutes < 60) or not (0 <= hours <= 24) or (hours == 24 and minutes):
        raise ValueError(f"Time out of range: {value!r}")
    return hours * 60 + minutes


def merge_windows(windows: Iterable[TimeWindow]) -> Tuple[TimeWindow, ...]:
    """
    Collapse overlapping or touching windows into the minimal disjoint set,
    sorted by start.
    """
    merged: List[TimeWindow] = []
    for w in sorted(windows):
        if merged and w.start <= merged[-1].end:
            last = merged[-1]
            merged[-1] = TimeWindow(last.start, max(last.end, w.end))
        else:
            merged.append(w)
    return tuple(merged)


def validate_window(
    start: Any,
    end: Any,
    *,
    participant: Optional[str] = None,
    field: str = "windows",
    day: Optional[int] = None,
    index: Optional[int] = None,
) -> TimeWindow:
    context = dict(participant=participant, field=field, day=day, index=index, window=(start, end))

    if not isinstance(start, int) or not isinstance(end, int) or isinstance(start, bool) or isinstance(end, bool):
        raise InvalidWindow("window bounds must be whole minutes", **context)
    if end <= start:
        raise InvalidWindow("end must be after start", **context)
    if start < 0 or end > MINUTES_PER_DAY:
        raise InvalidWindow(
            "window must lie within a single day [0, 1440]; split windows that cross midnight",
            **context,
        )
    return TimeWindow(start, end)


@dataclass(frozen=True)
class Preferences:
    bands: Tuple[TimeWindow, ...] = ()
    min_duration_minutes: int = 0
    max_duration_minutes: Optional[int] = None
    preferred_days: FrozenSet[DayOfWeek] = frozenset()


@dataclass(frozen=True)
class AvailabilityModel:
    """
    Canonical weekly availability of a single participant.

    `weekly` only holds days that have at least one window; each day's windows
    are disjoint, non-adjacent and sorted by start.
    """

    name: str
    weekly: Mapping[DayOfWeek, Tuple[TimeWindow, ...]] = field(default_factory=dict)
    preferences: Preferences = field(default_factory=Preferences)

    def windows_for(self, day: DayOfWeek) -> Tuple[TimeWindow, ...]:
        return self.weekly.get(day, ())


def _parse_day(raw_day: Any, *, participant: str, field: str, error_cls) -> DayOfWeek:
    try:
        return DayOfWeek(int(raw_day))
    except (TypeError, ValueError) as e:
        raise error_cls(
            f"day of week must be an integer 0-6, got {raw_day!r}",
            participant=participant,
            field=field,
        ) from e


def _window_bounds(raw: Any) -> Tuple[Any, Any]:
    if hasattr(raw, "start") and hasattr(raw, "end"):
        return raw.start, raw.end
    start, end = raw
    return start, end


def build_availability_model(
    *,
    name: str,
    windows: Mapping[Any, Iterable[Any]],
    bands: Iterable[Any] = (),
    time_of_day: Iterable[TimeOfDay] = (),
    min_duration_minutes: int = 0,
    max_duration_minutes: Optional[int] = None,
    preferred_days: Iterable[Any] = (),
) -> AvailabilityModel:
    """
    Validate raw weekly windows + preferences and return a canonical model.

    Windows are given per day as (start, end) pairs or objects with
    .start / .end, in minutes since midnight. Raises InvalidWindow or
    InvalidPreferences on the first violation found.
    """
    weekly = {}
    for raw_day, day_windows in windows.items():
        day = _parse_day(raw_day, participant=name, field="windows", error_cls=InvalidWindow)
        validated = [
            validate_window(*_window_bounds(raw), participant=name, field="windows", day=int(day), index=i)
            for i, raw in enumerate(day_windows)
        ]
        merged = merge_windows(list(weekly.get(day, ())) + validated)
        if merged:
            weekly[day] = merged

    band_windows = [
        validate_window(*_window_bounds(raw), participant=name, field="preferences.bands", index=i)
        for i, raw in enumerate(bands)
    ]
    band_windows.extend(time_of_day_window(TimeOfDay(tod)) for tod in time_of_day)

    if min_duration_minutes < 0:
        raise InvalidPreferences(
            "min_duration_minutes must not be negative",
            participant=name,
            field="preferences.min_duration_minutes",
        )
    if max_duration_minutes is not None and max_duration_minutes < max(min_duration_minutes, 1):
        raise InvalidPreferences(
            "max_duration_minutes must be positive and not below min_duration_minutes",
            participant=name,
            field="preferences.max_duration_minutes",
        )

    days = frozenset(
        _parse_day(d, participant=name, field="preferences.preferred_days", error_cls=InvalidPreferences)
        for d in preferred_days
    )

    return AvailabilityModel(
        name=name,
        weekly=weekly,
        preferences=Preferences(
            bands=merge_windows(band_windows),
            min_duration_minutes=min_duration_minutes,
            max_duration_minutes=max_duration_minutes,
            preferred_days=days,
        ),
    )


@dataclass(frozen=True)
class DateRange:
    """Inclusive on both ends."""

    start: date
    end: date

    @property
    def day_count(self) -> int:
        return (self.end - self.start).days + 1

    def days(self) -> Iterator[date]:
        current = self.start
        while current <= self.end:
            yield current
            current += timedelta(days=1)


def validate_date_range(start: date, end: date, max_days: int) -> DateRange:
    if end < start:
        raise InvalidDateRange(
            "date range end must not be before its start",
            field="date_range",
            window=(start.isoformat(), end.isoformat()),
        )
    date_range = DateRange(start, end)
    if date_range.day_count > max_days:
        raise InvalidDateRange(
            f"date range spans {date_range.day_count} days; at most {max_days} are allowed",
            field="date_range",
            window=(start.isoformat(), end.isoformat()),
        )
    return date_range
