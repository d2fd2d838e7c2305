from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, Integer, String

from availability_engine.models.base import Base


class ParticipantProfile(Base):
    """
    Stored weekly availability + preferences of one participant.

    Always written in canonical form (validated, merged, sorted), e.g.
      windows     = {"4": [[1080, 1380]], "5": [[600, 1380]]}
      preferences = {"bands": [[1020, 1320]], "min_duration_minutes": 120,
                     "max_duration_minutes": null, "preferred_days": [4, 5]}
    """

    __tablename__ = "participant_profiles"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)

    windows = Column(JSON, nullable=False, default=dict)
    preferences = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
