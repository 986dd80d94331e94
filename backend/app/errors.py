# app/errors.py

from typing import Any, Dict, Optional, Sequence


class HazardError(Exception):
    """
    Base for every failure the API reports to a caller.

    Each subclass knows its HTTP status and renders the JSON body the
    mobile clients already parse (`error`, plus any extra keys).
    """

    status_code = 400
    error = "Bad request"

    def __init__(self, extra: Optional[Dict[str, Any]] = None):
        super().__init__(self.error)
        self.extra = extra or {}

    def to_body(self) -> Dict[str, Any]:
        return {"error": self.error, **self.extra}


class MissingField(HazardError):
    error = "Missing required fields"

    def __init__(self, required: Sequence[str]):
        super().__init__({"required": list(required)})


class InvalidType(HazardError):
    error = "Invalid hazard type"

    def __init__(self, valid_types: Sequence[str]):
        super().__init__({"validTypes": list(valid_types)})


class InvalidCoordinates(HazardError):
    error = "Invalid coordinates"


class MissingCoordinates(HazardError):
    error = "Latitude and longitude are required"


class InvalidRadius(HazardError):
    error = "Invalid radius"


class DuplicateReport(HazardError):
    status_code = 409
    error = "Duplicate report detected"

    def __init__(self):
        super().__init__({"message": "Similar hazard already reported nearby"})


class NotFound(HazardError):
    status_code = 404
    error = "Hazard not found"


class StoreUnavailable(HazardError):
    """
    The database failed underneath an operation. `action` names what we
    were doing ("fetch hazards"), the driver message rides along for
    diagnostics.
    """

    status_code = 500

    def __init__(self, action: str, message: str):
        self.error = f"Failed to {action}"
        super().__init__({"message": message})
