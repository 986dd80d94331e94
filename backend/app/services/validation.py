# app/services/validation.py

from typing import Any, Literal, Mapping, get_args

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..errors import InvalidCoordinates, InvalidType, MissingField

HazardType = Literal["Road Closure", "Police", "Accident", "Debris", "Weather", "Other"]
HAZARD_TYPES = get_args(HazardType)
REQUIRED_FIELDS = ("type", "latitude", "longitude")

DEFAULT_REPORTER = "anonymous"
# Width of hazards.reported_by
MAX_REPORTER_LENGTH = 100


class HazardReport(BaseModel):
    """A report that passed validation and is ready for the store."""

    model_config = ConfigDict(frozen=True)

    type: HazardType
    latitude: float = Field(..., ge=-90, le=90, allow_inf_nan=False)
    longitude: float = Field(..., ge=-180, le=180, allow_inf_nan=False)
    reported_by: str = DEFAULT_REPORTER

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def _no_booleans(cls, value: Any) -> Any:
        # pydantic would read true/false as 1.0/0.0
        if isinstance(value, bool):
            raise ValueError("coordinates must be numbers")
        return value

    @field_validator("reported_by", mode="before")
    @classmethod
    def _default_reporter(cls, value: Any) -> str:
        if value is None:
            return DEFAULT_REPORTER
        text = str(value).strip()
        if not text:
            return DEFAULT_REPORTER
        return text[:MAX_REPORTER_LENGTH]


def _is_absent(value: Any) -> bool:
    # Zero and false are present values; only missing, null or blank
    # strings count as absent.
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def validate_report(payload: Mapping[str, Any]) -> HazardReport:
    """
    Gate a raw report body before it reaches the store.

    Checks run in the order clients have always seen them: required
    fields, then hazard type, then coordinate bounds. Raises
    MissingField / InvalidType / InvalidCoordinates, otherwise returns
    a HazardReport with float coordinates and a defaulted reporter.
    """
    if any(_is_absent(payload.get(field)) for field in REQUIRED_FIELDS):
        raise MissingField(REQUIRED_FIELDS)

    try:
        return HazardReport(
            type=payload["type"],
            latitude=payload["latitude"],
            longitude=payload["longitude"],
            reported_by=payload.get("reported_by"),
        )
    except ValidationError as e:
        if any(err["loc"][:1] == ("type",) for err in e.errors()):
            raise InvalidType(HAZARD_TYPES)
        raise InvalidCoordinates()
