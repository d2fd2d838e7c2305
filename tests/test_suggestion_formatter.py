from datetime import date

from availability_engine.schemas.suggestions import SuggestionConfig
from availability_engine.services.availability_model import DateRange, build_availability_model
from availability_engine.services.suggestion_formatter import (
    format_clock,
    format_date_display,
    format_duration,
    format_result,
    format_time_range,
)
from availability_engine.services.suggestion_service import suggest_dates


def test_format_clock():
    assert format_clock(0) == "12:00 AM"
    assert format_clock(9 * 60 + 5) == "9:05 AM"
    assert format_clock(12 * 60) == "12:00 PM"
    assert format_clock(18 * 60 + 30) == "6:30 PM"
    assert format_clock(1440) == "12:00 AM"


def test_format_time_range():
    assert format_time_range(1080, 1260) == "6:00 PM - 9:00 PM"


def test_format_duration():
    assert format_duration(45) == "45min"
    assert format_duration(120) == "2h"
    assert format_duration(150) == "2h 30m"


def test_format_date_display():
    assert format_date_display(date(2025, 1, 10)) == "Fri, Jan 10"


def test_format_result_builds_display_records_and_groups():
    sam = build_availability_model(
        name="Sam",
        windows={4: [(1020, 1320)], 5: [(600, 720)]},
        time_of_day=["EVENING"],
    )
    alex = build_availability_model(
        name="Alex",
        windows={4: [(1080, 1260)], 5: [(540, 780)]},
        time_of_day=["EVENING"],
    )
    result = suggest_dates(
        sam,
        alex,
        DateRange(date(2025, 1, 6), date(2025, 1, 12)),
        SuggestionConfig(min_duration_minutes=60, good_margin_minutes=60),
    )

    body = format_result(result)

    assert body.outcome == "suggestions"
    assert body.counts.ideal == 1
    assert body.counts.possible == 1
    assert body.candidate_count == 2

    first = body.suggestions[0]
    assert first.id == "suggestion-2025-01-10-1800-2100"
    assert first.day_label == "Fri"
    assert first.date_display == "Fri, Jan 10"
    assert first.is_weekend is False
    assert (first.start, first.end) == ("18:00", "21:00")
    assert first.time_range == "6:00 PM - 9:00 PM"
    assert first.duration_label == "3h"
    assert first.quality == "ideal"
    assert first.quality_label == "Perfect"
    assert first.quality_color == "#10B981"
    assert first.reason_code == "both_preferred"
    assert first.matches_preferences.user1 and first.matches_preferences.user2

    second = body.suggestions[1]
    assert second.is_weekend is True
    assert second.quality == "possible"

    assert list(body.groups) == ["ideal", "good", "possible"]
    assert [r.id for r in body.groups["ideal"]] == [first.id]
    assert body.groups["good"] == []
