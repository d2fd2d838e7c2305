# availability_engine/routers/suggestions.py
import logging

from fastapi import APIRouter, HTTPException

from availability_engine.schemas.suggestions import SuggestionRequest, SuggestionResponse
from availability_engine.services.errors import AvailabilityValidationError
from availability_engine.services.suggestion_formatter import format_result
from availability_engine.services.suggestion_service import suggest_dates_from_payload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/suggestions", tags=["suggestions"])


@router.post("", response_model=SuggestionResponse)
def create_suggestions(req: SuggestionRequest) -> SuggestionResponse:
    """
    Rank shared date/time suggestions for two participants.

    Example input:
      {
        "user1": {"name": "Sam", "windows": {"4": [{"start": "18:00", "end": "23:00"}]},
                  "preferences": {"time_of_day": ["EVENING"]}},
        "user2": {"name": "Alex", "windows": {"4": [{"start": "17:00", "end": "22:00"}]},
                  "preferences": {"time_of_day": ["EVENING"]}},
        "date_range": {"start": "2025-01-01", "end": "2025-01-14"}
      }

    An empty `suggestions` list with outcome "no_overlap" is a normal
    result; malformed availability comes back as 400 with a structured detail.
    """
    try:
        result = suggest_dates_from_payload(
            req.user1,
            req.user2,
            req.date_range.start,
            req.date_range.end,
            req.config,
        )
    except AvailabilityValidationError as e:
        logger.warning("Rejected suggestion request: %s", e.to_dict())
        raise HTTPException(status_code=400, detail=e.to_dict())

    return format_result(result)
