# availability_engine/schemas/availability.py
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from availability_engine.services.availability_model import TimeOfDay, parse_clock


class TimeWindowIn(BaseModel):
    """
    One free-time window. Bounds are minutes since midnight or "HH:MM"
    strings ("24:00" closes the day). Ordering is checked by the engine so
    the caller gets a pointed InvalidWindow error.
    """

    start: int
    end: int

    @field_validator("start", "end", mode="before")
    def parse_clock_strings(cls, v: Any) -> Any:
        if isinstance(v, str) and ":" in v:
            return parse_clock(v)
        return v


class PreferencesIn(BaseModel):
    bands: List[TimeWindowIn] = Field(default_factory=list)
    time_of_day: List[TimeOfDay] = Field(default_factory=list)
    min_duration_minutes: int = 0
    max_duration_minutes: Optional[int] = None
    preferred_days: List[int] = Field(default_factory=list)


class ParticipantAvailabilityIn(BaseModel):
    name: Optional[str] = None
    # day of week (0=MON ... 6=SUN) -> windows
    windows: Dict[int, List[TimeWindowIn]] = Field(default_factory=dict)
    preferences: PreferencesIn = Field(default_factory=PreferencesIn)


class ParticipantProfileOut(BaseModel):
    id: int
    name: str
    windows: Dict[int, List[TimeWindowIn]]
    preferences: PreferencesIn
