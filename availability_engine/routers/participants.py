# availability_engine/routers/participants.py
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from availability_engine.db.session import get_db
from availability_engine.schemas.availability import (
    ParticipantAvailabilityIn,
    ParticipantProfileOut,
)
from availability_engine.schemas.suggestions import (
    ProfileSuggestionRequest,
    SuggestionConfig,
    SuggestionResponse,
)
from availability_engine.services.availability_model import DateRange
from availability_engine.services.errors import AvailabilityValidationError
from availability_engine.services.participant_service import (
    availability_from_profile,
    create_participant_profile,
    get_participant_profile,
    profile_to_dict,
    update_participant_profile,
)
from availability_engine.services.suggestion_formatter import format_result
from availability_engine.services.suggestion_service import suggest_dates

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/participants", tags=["participants"])


def _bad_request(e: AvailabilityValidationError) -> HTTPException:
    logger.warning("Rejected participant request: %s", e.to_dict())
    return HTTPException(status_code=400, detail=e.to_dict())


@router.post("", response_model=ParticipantProfileOut)
def create_participant(
        payload: ParticipantAvailabilityIn,
        db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """
    Store a participant's weekly availability + preferences.

    Windows are merged and sorted before they are saved.
    """
    try:
        profile = create_participant_profile(db, payload)
    except AvailabilityValidationError as e:
        raise _bad_request(e)

    return profile_to_dict(profile)


@router.get("/{participant_id}", response_model=ParticipantProfileOut)
def get_participant(
        participant_id: int,
        db: Session = Depends(get_db),
) -> Dict[str, Any]:
    profile = get_participant_profile(db, participant_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Participant not found")
    return profile_to_dict(profile)


@router.put("/{participant_id}", response_model=ParticipantProfileOut)
def replace_participant(
        participant_id: int,
        payload: ParticipantAvailabilityIn,
        db: Session = Depends(get_db),
) -> Dict[str, Any]:
    try:
        profile = update_participant_profile(db, participant_id, payload)
    except AvailabilityValidationError as e:
        raise _bad_request(e)

    if profile is None:
        raise HTTPException(status_code=404, detail="Participant not found")
    return profile_to_dict(profile)


@router.post("/suggestions", response_model=SuggestionResponse)
def suggest_for_participants(
        req: ProfileSuggestionRequest,
        db: Session = Depends(get_db),
) -> SuggestionResponse:
    """
    Load two stored profiles and rank shared date suggestions for them.

    The engine itself never sees the session; profiles are turned into
    AvailabilityModels here first.
    """
    profiles = []
    for participant_id in (req.user1_id, req.user2_id):
        profile = get_participant_profile(db, participant_id)
        if not profile:
            raise HTTPException(
                status_code=404,
                detail=f"Participant {participant_id} not found",
            )
        profiles.append(profile)

    config = req.config or SuggestionConfig()
    try:
        user1, user2 = (availability_from_profile(p) for p in profiles)
        date_range = DateRange(req.date_range.start, req.date_range.end)
        result = suggest_dates(user1, user2, date_range, config)
    except AvailabilityValidationError as e:
        raise _bad_request(e)

    return format_result(result)
