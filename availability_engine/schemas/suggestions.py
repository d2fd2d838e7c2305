# availability_engine/schemas/suggestions.py
import enum
from datetime import date
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from availability_engine.config import get_settings
from availability_engine.schemas.availability import ParticipantAvailabilityIn


class CuttingPolicy(str, enum.Enum):
    """How an overlap longer than the maximum duration is cut into slots."""

    BAND_ANCHORED = "band_anchored"
    SINGLE = "single"
    FIXED_LENGTH = "fixed_length"


class SuggestionConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_duration_minutes: int = Field(
        default_factory=lambda: get_settings().DEFAULT_MIN_DURATION_MINUTES, ge=1, le=1440
    )
    max_duration_minutes: Optional[int] = Field(default=None, ge=1, le=1440)
    max_suggestions: int = Field(
        default_factory=lambda: get_settings().DEFAULT_MAX_SUGGESTIONS, ge=1
    )
    min_ideal_reserved: int = Field(
        default_factory=lambda: get_settings().DEFAULT_MIN_IDEAL_RESERVED, ge=0
    )
    # "good" threshold for slots that match nobody's preferences
    good_margin_minutes: int = Field(
        default_factory=lambda: get_settings().DEFAULT_GOOD_MARGIN_MINUTES, ge=0
    )
    cutting_policy: CuttingPolicy = Field(
        default_factory=lambda: CuttingPolicy(get_settings().DEFAULT_CUTTING_POLICY)
    )
    max_range_days: int = Field(default_factory=lambda: get_settings().MAX_RANGE_DAYS, ge=1)

    @model_validator(mode="after")
    def check_max_not_below_min(self) -> "SuggestionConfig":
        if self.max_duration_minutes is not None and self.max_duration_minutes < self.min_duration_minutes:
            raise ValueError("max_duration_minutes must not be below min_duration_minutes")
        return self


class DateRangeIn(BaseModel):
    start: date
    end: date


class SuggestionRequest(BaseModel):
    user1: ParticipantAvailabilityIn
    user2: ParticipantAvailabilityIn
    date_range: DateRangeIn
    config: Optional[SuggestionConfig] = None


class ProfileSuggestionRequest(BaseModel):
    user1_id: int
    user2_id: int
    date_range: DateRangeIn
    config: Optional[SuggestionConfig] = None


class MatchFlagsOut(BaseModel):
    user1: bool
    user2: bool


class DateSuggestionOut(BaseModel):
    id: str
    date: date
    day_of_week: int
    day_label: str
    date_display: str
    is_weekend: bool
    start: str
    end: str
    time_range: str
    duration_minutes: int
    duration_label: str
    quality: str
    quality_label: str
    quality_color: str
    reason: str
    reason_code: str
    matches_preferences: MatchFlagsOut


class TierCountsOut(BaseModel):
    ideal: int = 0
    good: int = 0
    possible: int = 0


class SuggestionResponse(BaseModel):
    outcome: str
    counts: TierCountsOut
    candidate_count: int
    suggestions: List[DateSuggestionOut]
    groups: Dict[str, List[DateSuggestionOut]]
