import math
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from Login_module.Utils.datetime_utils import parse_session_date

# Wire names of the fields a new member cannot be created without
REQUIRED_FIELDS = ("name", "constituency", "sessionName", "sessionDate", "speechGiven", "timeTaken")


def _require_text(v: Any, label: str) -> str:
    if v is None:
        raise ValueError(f"{label} is required and cannot be empty")
    v_trimmed = str(v).strip()
    if not v_trimmed:
        raise ValueError(f"{label} cannot be empty or whitespace only")
    return v_trimmed


def _coerce_time_taken(v: Any) -> float:
    if v is None or isinstance(v, bool):
        raise ValueError("timeTaken must be a number")
    if isinstance(v, str):
        v = v.strip()
        if not v:
            raise ValueError("timeTaken is required and cannot be empty")
    try:
        number = float(v)
    except (TypeError, ValueError):
        raise ValueError("timeTaken must be a number")
    if not math.isfinite(number):
        raise ValueError("timeTaken must be a finite number")
    if number < 0:
        raise ValueError("timeTaken cannot be negative")
    return number


def _coerce_session_date(v: Any) -> datetime:
    try:
        return parse_session_date(v)
    except (TypeError, ValueError):
        raise ValueError("sessionDate must be a valid date (YYYY-MM-DD or ISO-8601)")


class MemberCreate(BaseModel):
    """Fields of a new member. Wire names are camelCase."""
    name: str = Field(..., description="Member name")
    constituency: str = Field(..., description="Constituency")
    session_name: str = Field(..., alias="sessionName", description="Session name")
    session_date: datetime = Field(..., alias="sessionDate", description="Session date")
    speech_given: str = Field(..., alias="speechGiven", description="Speech text")
    time_taken: float = Field(..., alias="timeTaken", description="Time taken in minutes")
    party_name: str = Field("", alias="partyName", description="Party name (optional)")
    image_url: str = Field("", alias="imageUrl", description="Photo URL (optional)")
    party_logo_url: str = Field("", alias="partyLogoUrl", description="Party logo URL (optional)")

    @field_validator("name", "constituency", "session_name", mode="before")
    @classmethod
    def validate_trimmed_text(cls, v, info):
        field = cls.model_fields[info.field_name]
        return _require_text(v, field.alias or info.field_name)

    @field_validator("speech_given", mode="before")
    @classmethod
    def validate_speech(cls, v):
        # Speech text is stored as given, but must not be blank
        _require_text(v, "speechGiven")
        return str(v)

    @field_validator("session_date", mode="before")
    @classmethod
    def validate_session_date(cls, v):
        return _coerce_session_date(v)

    @field_validator("time_taken", mode="before")
    @classmethod
    def validate_time_taken(cls, v):
        return _coerce_time_taken(v)

    @field_validator("party_name", "image_url", "party_logo_url", mode="before")
    @classmethod
    def validate_optional_text(cls, v):
        return "" if v is None else str(v).strip()


class MemberUpdate(MemberCreate):
    """
    Partial update - every field optional.
    Only keys present in the payload are validated and replaced.
    """
    name: Optional[str] = Field(None, description="Member name")
    constituency: Optional[str] = Field(None, description="Constituency")
    session_name: Optional[str] = Field(None, alias="sessionName", description="Session name")
    session_date: Optional[datetime] = Field(None, alias="sessionDate", description="Session date")
    speech_given: Optional[str] = Field(None, alias="speechGiven", description="Speech text")
    time_taken: Optional[float] = Field(None, alias="timeTaken", description="Time taken in minutes")
    party_name: Optional[str] = Field(None, alias="partyName", description="Party name")
    image_url: Optional[str] = Field(None, alias="imageUrl", description="Photo URL")
    party_logo_url: Optional[str] = Field(None, alias="partyLogoUrl", description="Party logo URL")

    def changes(self) -> Dict[str, Any]:
        """Column values for the fields that were supplied."""
        return self.model_dump(exclude_unset=True)


class MemberFilterOptions(BaseModel):
    sessionNames: List[str]
    sessionDates: List[str]


def missing_required_fields(payload: Dict[str, Any]) -> List[str]:
    """Wire names of required fields that are absent, null or blank."""
    missing = []
    for field in REQUIRED_FIELDS:
        value = payload.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(field)
    return missing


def describe_validation_error(exc: ValidationError) -> str:
    """Flatten a pydantic ValidationError into one human readable message."""
    messages = []
    for err in exc.errors():
        loc = err.get("loc", ())
        field = str(loc[-1]) if loc else "body"
        message = err.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        messages.append(message if field in message else f"{field}: {message}")
    return "; ".join(messages) or "Invalid member data"
