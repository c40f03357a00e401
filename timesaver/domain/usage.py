"""Domain models for calculator inputs and results."""
import math
from typing import Any, Dict, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator


# Hours saved per unit of each input.
TIME_SAVINGS: Dict[str, float] = {
    "emails_per_week": 0.02,   # 1.2 minutes per email
    "data_entry_hours": 0.7,   # 70% of data entry automated
    "follow_ups": 0.08,        # ~5 minutes per follow-up
    "reporting_hours": 0.6,    # 60% of reporting automated
}

# Ranges the interactive calculator clamps to.
CLIENT_BOUNDS: Dict[str, Tuple[float, float]] = {
    "emails_per_week": (0, 500),
    "data_entry_hours": (0, 80),
    "follow_ups": (0, 200),
    "reporting_hours": (0, 40),
}

# Ranges the API accepts; anything outside is rejected.
SERVER_BOUNDS: Dict[str, Tuple[float, float]] = {
    "emails_per_week": (0, 1000),
    "data_entry_hours": (0, 100),
    "follow_ups": (0, 500),
    "reporting_hours": (0, 100),
}

# Whole-number inputs; the calculator truncates these.
COUNT_FIELDS = frozenset({"emails_per_week", "follow_ups"})


def _to_number(value: Any) -> float:
    """Lenient numeric coercion: anything unparseable becomes NaN."""
    if isinstance(value, bool) or value is None:
        return math.nan
    try:
        if isinstance(value, (int, float)):
            return float(value)
        return float(str(value).strip())
    except OverflowError:
        return math.inf
    except ValueError:
        return math.nan


def clamp(value: Any, field: str) -> float:
    """Clamp a raw input into its calculator range.

    Non-numeric and NaN input falls back to the field minimum.
    """
    minimum, maximum = CLIENT_BOUNDS[field]
    number = _to_number(value)
    if math.isnan(number) or number < minimum:
        return minimum
    if number > maximum:
        return maximum
    if field in COUNT_FIELDS:
        return float(int(number))
    return number


class UsageInputs(BaseModel):
    """The four usage metrics entered into the calculator.

    Values are clamped on construction, so an instance is always within the
    calculator's ranges.
    """
    emails_per_week: float = 0
    data_entry_hours: float = 0
    follow_ups: float = 0
    reporting_hours: float = 0

    @field_validator("*", mode="before")
    @classmethod
    def _clamp_to_range(cls, value: Any, info) -> float:
        return clamp(value, info.field_name)


class CalculationRequest(BaseModel):
    """Body of ``POST /api/calculate``.

    Every field must be a finite JSON number inside its server range.
    """
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "emailsPerWeek": 200,
                "dataEntry": 10,
                "followUps": 50,
                "reporting": 5
            }
        },
    )

    emails_per_week: float = Field(
        alias="emailsPerWeek",
        ge=SERVER_BOUNDS["emails_per_week"][0],
        le=SERVER_BOUNDS["emails_per_week"][1],
    )
    data_entry_hours: float = Field(
        alias="dataEntry",
        ge=SERVER_BOUNDS["data_entry_hours"][0],
        le=SERVER_BOUNDS["data_entry_hours"][1],
    )
    follow_ups: float = Field(
        alias="followUps",
        ge=SERVER_BOUNDS["follow_ups"][0],
        le=SERVER_BOUNDS["follow_ups"][1],
    )
    reporting_hours: float = Field(
        alias="reporting",
        ge=SERVER_BOUNDS["reporting_hours"][0],
        le=SERVER_BOUNDS["reporting_hours"][1],
    )

    @field_validator("*", mode="before")
    @classmethod
    def _must_be_number(cls, value: Any) -> Any:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("must be a number")
        try:
            finite = math.isfinite(value)
        except OverflowError:
            finite = False
        if not finite:
            raise ValueError("must be finite")
        return value


class Breakdown(BaseModel):
    """Per-field contribution to the total, in hours, one decimal place."""
    model_config = ConfigDict(populate_by_name=True)

    email: float
    data_entry: float = Field(alias="dataEntry")
    follow_up: float = Field(alias="followUp")
    reporting: float


class CalculationResponse(BaseModel):
    """Response of ``POST /api/calculate``."""
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    total_hours: int = Field(alias="totalHours", ge=1)
    breakdown: Breakdown
