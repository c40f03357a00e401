"""Domain models for analytics events and lead capture."""
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class AnalyticsRequest(BaseModel):
    """Body of ``POST /api/analytics``. The event shape is not validated."""
    model_config = ConfigDict(extra="ignore")

    event: Any = None
    properties: Any = None


class LeadRequest(BaseModel):
    """Body of ``POST /api/lead``.

    Attributes:
        email: Contact email; must contain "@"
        phone: Optional phone number
        company: Optional company name
        calculated_hours: Hours figure the visitor saw in the calculator

    Optional fields accept any JSON value; empty, zero and false values are
    recorded as null.
    """
    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        json_schema_extra={
            "example": {
                "email": "ops@acme.example",
                "company": "Acme",
                "calculatedHours": 12
            }
        },
    )

    email: Optional[str] = Field(default=None, validate_default=True)
    phone: Any = None
    company: Any = None
    calculated_hours: Any = Field(default=None, alias="calculatedHours")

    @field_validator("email")
    @classmethod
    def _plausible_email(cls, value: Optional[str]) -> str:
        if not value or "@" not in value:
            raise ValueError("Valid email is required")
        return value.strip()

    @field_validator("phone", "company", "calculated_hours", mode="before")
    @classmethod
    def _falsy_as_none(cls, value: Any) -> Any:
        if not value:
            return None
        return value


class AnalyticsRecord(BaseModel):
    """Analytics event as written to the event sink."""
    timestamp: str
    event: Any = None
    properties: Any = None
    ip: Optional[str] = None
    user_agent: Optional[str] = None


class LeadRecord(BaseModel):
    """Lead as written to the event sink; missing optionals are null."""
    timestamp: str
    email: str
    phone: Optional[str] = None
    company: Optional[str] = None
    calculated_hours: Any = None
    ip: Optional[str] = None


class SuccessResponse(BaseModel):
    """Generic acknowledgement body."""
    success: bool = True
    message: Optional[str] = None
