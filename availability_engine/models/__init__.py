from availability_engine.models.base import Base  # noqa: F401

from availability_engine.models.participant_profile import ParticipantProfile  # noqa: F401
