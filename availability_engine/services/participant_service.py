# availability_engine/services/participant_service.py
import logging
from typing import Any, Dict, Optional, Tuple

from sqlalchemy.orm import Session

from availability_engine.models.participant_profile import ParticipantProfile
from availability_engine.schemas.availability import ParticipantAvailabilityIn
from availability_engine.services.availability_model import (
    AvailabilityModel,
    build_availability_model,
)

logger = logging.getLogger(__name__)


def availability_from_payload(
    payload: ParticipantAvailabilityIn,
    *,
    default_name: str,
) -> AvailabilityModel:
    """
    Validate a raw payload into a canonical AvailabilityModel.

    Raises InvalidWindow / InvalidPreferences (both ValueError subclasses).
    """
    prefs = payload.preferences
    return build_availability_model(
        name=payload.name or default_name,
        windows=payload.windows,
        bands=prefs.bands,
        time_of_day=prefs.time_of_day,
        min_duration_minutes=prefs.min_duration_minutes,
        max_duration_minutes=prefs.max_duration_minutes,
        preferred_days=prefs.preferred_days,
    )


def availability_to_json(model: AvailabilityModel) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Canonical model -> (windows, preferences) JSON column values."""
    windows = {
        str(int(day)): [[w.start, w.end] for w in day_windows]
        for day, day_windows in sorted(model.weekly.items())
    }
    prefs = model.preferences
    preferences = {
        "bands": [[b.start, b.end] for b in prefs.bands],
        "min_duration_minutes": prefs.min_duration_minutes,
        "max_duration_minutes": prefs.max_duration_minutes,
        "preferred_days": sorted(int(d) for d in prefs.preferred_days),
    }
    return windows, preferences


def availability_from_profile(profile: ParticipantProfile) -> AvailabilityModel:
    """
    Stored rows are canonical already, but they go through validation again
    so a hand-edited row can't smuggle a bad window into the engine.
    """
    prefs = profile.preferences or {}
    return build_availability_model(
        name=profile.name,
        windows={int(day): [tuple(w) for w in ws] for day, ws in (profile.windows or {}).items()},
        bands=[tuple(b) for b in prefs.get("bands", [])],
        min_duration_minutes=prefs.get("min_duration_minutes", 0),
        max_duration_minutes=prefs.get("max_duration_minutes"),
        preferred_days=prefs.get("preferred_days", []),
    )


def profile_to_dict(profile: ParticipantProfile) -> Dict[str, Any]:
    prefs = profile.preferences or {}
    return {
        "id": profile.id,
        "name": profile.name,
        "windows": {
            int(day): [{"start": s, "end": e} for s, e in ws]
            for day, ws in (profile.windows or {}).items()
        },
        "preferences": {
            "bands": [{"start": s, "end": e} for s, e in prefs.get("bands", [])],
            "min_duration_minutes": prefs.get("min_duration_minutes", 0),
            "max_duration_minutes": prefs.get("max_duration_minutes"),
            "preferred_days": prefs.get("preferred_days", []),
        },
    }


def get_participant_profile(db: Session, profile_id: int) -> Optional[ParticipantProfile]:
    return db.query(ParticipantProfile).filter_by(id=profile_id).first()


def create_participant_profile(
    db: Session,
    payload: ParticipantAvailabilityIn,
) -> ParticipantProfile:
    """
    Validate and store a participant's availability.

    Nothing is written when validation fails.
    """
    model = availability_from_payload(payload, default_name="participant")
    windows, preferences = availability_to_json(model)

    profile = ParticipantProfile(name=model.name, windows=windows, preferences=preferences)
    db.add(profile)
    db.commit()
    db.refresh(profile)

    logger.info("Created participant profile %s (%s)", profile.id, profile.name)
    return profile


def update_participant_profile(
    db: Session,
    profile_id: int,
    payload: ParticipantAvailabilityIn,
) -> Optional[ParticipantProfile]:
    """
    Replace a profile's windows and preferences.

    Returns None if the profile doesn't exist.
    """
    profile = get_participant_profile(db, profile_id)
    if profile is None:
        return None

    model = availability_from_payload(payload, default_name=profile.name)
    windows, preferences = availability_to_json(model)

    profile.name = model.name
    profile.windows = windows
    profile.preferences = preferences
    db.commit()
    db.refresh(profile)

    logger.info("Updated participant profile %s", profile.id)
    return profile
