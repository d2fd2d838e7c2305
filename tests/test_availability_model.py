from datetime import date

import pytest

from availability_engine.services.availability_model import (
    DayOfWeek,
    TimeOfDay,
    TimeWindow,
    build_availability_model,
    day_full_label,
    day_label,
    merge_windows,
    parse_clock,
    validate_date_range,
)
from availability_engine.services.errors import (
    InvalidDateRange,
    InvalidPreferences,
    InvalidWindow,
)


def test_merges_overlapping_and_touching_windows():
    model = build_availability_model(
        name="Sam",
        windows={0: [(600, 700), (540, 610), (700, 720), (800, 900)]},
    )

    # 09:00–10:10 + 10:00–11:40 + 11:40–12:00 collapse into one window
    assert model.windows_for(DayOfWeek.MONDAY) == (
        TimeWindow(540, 720),
        TimeWindow(800, 900),
    )
    assert model.windows_for(DayOfWeek.TUESDAY) == ()


def test_merge_windows_keeps_contained_window_inside_outer():
    assert merge_windows([TimeWindow(600, 900), TimeWindow(650, 700)]) == (TimeWindow(600, 900),)


def test_empty_day_is_dropped():
    model = build_availability_model(name="Sam", windows={3: []})
    assert model.weekly == {}


def test_full_day_window_is_valid():
    model = build_availability_model(name="Sam", windows={6: [(0, 1440)]})
    assert model.windows_for(DayOfWeek.SUNDAY) == (TimeWindow(0, 1440),)


def test_rejects_window_with_end_not_after_start():
    with pytest.raises(InvalidWindow) as exc_info:
        build_availability_model(name="Sam", windows={2: [(540, 600), (600, 600)]})

    err = exc_info.value
    assert err.participant == "Sam"
    assert err.field == "windows"
    assert err.day == 2
    assert err.index == 1
    assert err.window == (600, 600)
    assert err.to_dict()["error"] == "invalid_window"


def test_rejects_window_crossing_midnight():
    with pytest.raises(InvalidWindow):
        build_availability_model(name="Sam", windows={4: [(1380, 1500)]})


def test_rejects_negative_start():
    with pytest.raises(InvalidWindow):
        build_availability_model(name="Sam", windows={4: [(-30, 60)]})


def test_rejects_unknown_day_of_week():
    with pytest.raises(InvalidWindow) as exc_info:
        build_availability_model(name="Sam", windows={7: [(540, 600)]})
    assert exc_info.value.field == "windows"


def test_named_and_explicit_bands_are_merged():
    model = build_availability_model(
        name="Sam",
        windows={},
        bands=[(1020, 1100)],
        time_of_day=[TimeOfDay.EVENING],
    )
    assert model.preferences.bands == (TimeWindow(1020, 1320),)


def test_rejects_invalid_band():
    with pytest.raises(InvalidWindow) as exc_info:
        build_availability_model(name="Sam", windows={}, bands=[(900, 800)])
    assert exc_info.value.field == "preferences.bands"


def test_rejects_bad_preference_durations():
    with pytest.raises(InvalidPreferences):
        build_availability_model(name="Sam", windows={}, min_duration_minutes=-1)

    with pytest.raises(InvalidPreferences):
        build_availability_model(
            name="Sam",
            windows={},
            min_duration_minutes=120,
            max_duration_minutes=90,
        )


def test_rejects_unknown_preferred_day():
    with pytest.raises(InvalidPreferences) as exc_info:
        build_availability_model(name="Sam", windows={}, preferred_days=[9])
    assert exc_info.value.field == "preferences.preferred_days"


def test_preferred_days_become_enum_members():
    model = build_availability_model(name="Sam", windows={}, preferred_days=[4, 5, 5])
    assert model.preferences.preferred_days == frozenset({DayOfWeek.FRIDAY, DayOfWeek.SATURDAY})


def test_parse_clock():
    assert parse_clock("00:00") == 0
    assert parse_clock("18:30") == 1110
    assert parse_clock("24:00") == 1440

    for bad in ("24:30", "9am", "12:60", ""):
        with pytest.raises(ValueError):
            parse_clock(bad)


def test_validate_date_range_is_inclusive():
    date_range = validate_date_range(date(2025, 1, 6), date(2025, 1, 12), max_days=90)
    days = list(date_range.days())
    assert date_range.day_count == 7
    assert days[0] == date(2025, 1, 6)
    assert days[-1] == date(2025, 1, 12)


def test_validate_date_range_rejects_reversed_range():
    with pytest.raises(InvalidDateRange) as exc_info:
        validate_date_range(date(2025, 1, 12), date(2025, 1, 6), max_days=90)
    assert exc_info.value.to_dict()["error"] == "invalid_date_range"


def test_validate_date_range_caps_length():
    # 90 days inclusive is fine, 91 is not
    validate_date_range(date(2025, 1, 1), date(2025, 3, 31), max_days=90)
    with pytest.raises(InvalidDateRange):
        validate_date_range(date(2025, 1, 1), date(2025, 4, 1), max_days=90)


def test_day_of_week_labels():
    assert DayOfWeek.for_date(date(2025, 1, 6)) is DayOfWeek.MONDAY
    assert DayOfWeek.for_date(date(2025, 1, 10)) is DayOfWeek.FRIDAY
    assert day_label(DayOfWeek.FRIDAY) == "Fri"
    assert day_full_label(DayOfWeek.WEDNESDAY) == "Wednesday"
