# availability_engine/services/errors.py
from typing import Any, Dict, Optional, Tuple


class AvailabilityValidationError(ValueError):
    """
    Raised when an engine input breaks one of its invariants.

    Carries enough context for the caller to point at the malformed entry
    (which participant, which field, which day / list index, which window)
    instead of surfacing an opaque message.
    """

    code = "invalid_input"

    def __init__(
        self,
        message: str,
        *,
        participant: Optional[str] = None,
        field: Optional[str] = None,
        day: Optional[int] = None,
        index: Optional[int] = None,
        window: Optional[Tuple[Any, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.participant = participant
        self.field = field
        self.day = day
        self.index = index
        self.window = window

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "participant": self.participant,
            "field": self.field,
            "day": self.day,
            "index": self.index,
            "window": list(self.window) if self.window is not None else None,
        }


class InvalidWindow(AvailabilityValidationError):
    code = "invalid_window"


class InvalidDateRange(AvailabilityValidationError):
    code = "invalid_date_range"


class InvalidPreferences(AvailabilityValidationError):
    code = "invalid_preferences"
