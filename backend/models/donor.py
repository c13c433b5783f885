from pydantic import BaseModel, Field, ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime, timezone
import re
import uuid
from .enums import BloodGroup, District, Gender, Availability, DonorContactOutcome

PHONE_PATTERN = r"^\d{10}$"
EMAIL_RE = re.compile(r"^\S+@\S+\.\S+$")


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


class Donor(BaseModel):
    model_config = ConfigDict(extra="ignore", use_enum_values=True)
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    full_name: str
    email: str
    phone: str
    age: int
    gender: Gender
    blood_group: BloodGroup
    district: District
    address: Optional[str] = None
    emergency_contact: Optional[str] = None
    medical_conditions: str = ""
    last_donation_date: Optional[str] = None
    willing_to_donate: bool = True
    is_active: bool = True
    availability: Availability = Availability.AVAILABLE
    registration_date: str = Field(default_factory=utc_now_iso)
    last_updated: str = Field(default_factory=utc_now_iso)

class DonorCreate(BaseModel):
    """Registration payload. Field constraints mirror the registry rules."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)
    full_name: str = Field(min_length=1)
    email: str
    phone: str = Field(pattern=PHONE_PATTERN)
    age: int = Field(ge=18, le=65)
    gender: Gender
    blood_group: BloodGroup
    district: District
    address: Optional[str] = None
    last_donation_date: Optional[datetime] = None
    willing_to_donate: bool = True
    emergency_contact: Optional[str] = Field(default=None, pattern=PHONE_PATTERN)
    medical_conditions: Optional[str] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        v = v.strip().lower()
        if not EMAIL_RE.match(v):
            raise ValueError("Please enter a valid email")
        return v

    @field_validator("last_donation_date")
    @classmethod
    def to_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        # stored as ISO strings, which only sort in time order on a single offset
        if v is None:
            return v
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    @field_validator("emergency_contact", "last_donation_date", mode="before")
    @classmethod
    def blank_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

class DonorContact(BaseModel):
    status: DonorContactOutcome
