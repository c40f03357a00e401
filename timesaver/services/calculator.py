"""Hours-saved calculator.

A fixed-weight linear estimate: each usage metric is multiplied by the hours
it saves per unit, the contributions are summed and rounded half up, and the
result never drops below one hour.
"""
import math
from typing import Any, Mapping, Union

from timesaver.domain.usage import (
    TIME_SAVINGS,
    Breakdown,
    CalculationRequest,
    CalculationResponse,
    UsageInputs,
)

MINIMUM_HOURS = 1

Inputs = Union[UsageInputs, CalculationRequest]


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with ties going up (``2.5 -> 3``), unlike the builtin ``round``."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def _contributions(inputs: Inputs) -> dict:
    return {field: getattr(inputs, field) * weight for field, weight in TIME_SAVINGS.items()}


def total_hours(inputs: Inputs) -> int:
    """Sum of contributions, rounded half up and floored at one hour."""
    total = sum(_contributions(inputs).values())
    return max(int(round_half_up(total)), MINIMUM_HOURS)


def clamp_inputs(raw: Mapping[str, Any]) -> UsageInputs:
    """Build calculator inputs from loosely typed form values.

    Missing, non-numeric or out-of-range values are clamped into range.
    """
    return UsageInputs(**{field: raw.get(field) for field in TIME_SAVINGS})


def estimate_hours_saved(inputs: Union[UsageInputs, Mapping[str, Any]]) -> int:
    """Estimated weekly hours saved for the interactive calculator.

    Args:
        inputs: UsageInputs or a mapping of raw field values

    Returns:
        Whole hours per week, at least 1

    Examples:
        >>> estimate_hours_saved({"emails_per_week": 100})
        2
        >>> estimate_hours_saved(UsageInputs())
        1
    """
    if not isinstance(inputs, UsageInputs):
        inputs = clamp_inputs(inputs)
    return total_hours(inputs)


def calculate_breakdown(inputs: Inputs) -> Breakdown:
    """Per-field contributions rounded half up to one decimal place."""
    parts = {field: round_half_up(hours, 1) for field, hours in _contributions(inputs).items()}
    return Breakdown(
        email=parts["emails_per_week"],
        data_entry=parts["data_entry_hours"],
        follow_up=parts["follow_ups"],
        reporting=parts["reporting_hours"],
    )


def calculate_savings(request: CalculationRequest) -> CalculationResponse:
    """Total and breakdown for an already validated API request."""
    return CalculationResponse(
        total_hours=total_hours(request),
        breakdown=calculate_breakdown(request),
    )
