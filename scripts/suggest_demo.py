# scripts/suggest_demo.py
from datetime import date, timedelta

from availability_engine.logging_config import configure_logging
from availability_engine.schemas.availability import ParticipantAvailabilityIn
from availability_engine.schemas.suggestions import SuggestionConfig
from availability_engine.services.errors import AvailabilityValidationError
from availability_engine.services.suggestion_formatter import format_result
from availability_engine.services.suggestion_service import suggest_dates_from_payload


def main() -> None:
    configure_logging()

    # 1) Two participants with partly overlapping evenings
    sam = ParticipantAvailabilityIn(
        name="Sam",
        windows={
            0: [{"start": "18:00", "end": "23:00"}],
            2: [{"start": "18:00", "end": "23:00"}],
            4: [{"start": "18:00", "end": "23:00"}],
            5: [{"start": "10:00", "end": "23:00"}],
        },
        preferences={"time_of_day": ["EVENING"], "min_duration_minutes": 120, "preferred_days": [4, 5]},
    )
    alex = ParticipantAvailabilityIn(
        name="Alex",
        windows={
            3: [{"start": "19:00", "end": "22:00"}],
            4: [{"start": "17:00", "end": "23:30"}],
            5: [{"start": "09:00", "end": "14:00"}, {"start": "16:00", "end": "23:00"}],
            6: [{"start": "11:00", "end": "20:00"}],
        },
        preferences={"time_of_day": ["EVENING"], "max_duration_minutes": 240, "preferred_days": [4, 5, 6]},
    )

    # 2) Next two weeks
    start = date.today()
    end = start + timedelta(days=13)

    try:
        result = suggest_dates_from_payload(
            sam, alex, start, end, SuggestionConfig(min_duration_minutes=90)
        )
    except AvailabilityValidationError as e:
        print(f"Invalid availability: {e.to_dict()}")
        return

    body = format_result(result)
    if result.no_overlap:
        print("No shared time found. Try relaxing preferences or widening the range.")
        return

    print(f"{body.counts.ideal} ideal / {body.counts.good} good / {body.counts.possible} possible")
    for s in body.suggestions:
        print(f"[{s.quality_label:8}] {s.date_display} {s.time_range} ({s.duration_label}) - {s.reason}")


if __name__ == "__main__":
    main()
