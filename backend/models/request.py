from pydantic import BaseModel, Field, ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List
import uuid
from .enums import BloodGroup, District, Urgency, RequestStatus, ContactStatus
from .donor import PHONE_PATTERN, utc_now_iso

DONORS_PER_PAGE = 5
# page numbers are persisted; larger values are clamped to stay in BSON integer range
MAX_PAGE = 2 ** 31 - 1


class ContactEntry(BaseModel):
    """One member of a request's frozen donor snapshot."""
    model_config = ConfigDict(extra="ignore", use_enum_values=True)
    donor_id: str
    contact_status: ContactStatus = ContactStatus.NOT_CONTACTED
    contact_time: Optional[str] = None
    notes: Optional[str] = None

class StatusUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore", use_enum_values=True)
    donor_id: str
    old_status: Optional[ContactStatus] = None
    new_status: ContactStatus
    updated_at: str = Field(default_factory=utc_now_iso)

class SearchSession(BaseModel):
    model_config = ConfigDict(extra="ignore")
    session_id: Optional[str] = None
    current_page: int = 1
    donors_per_page: int = DONORS_PER_PAGE
    total_pages: int = 0
    status_updates: List[StatusUpdate] = []

class BloodRequest(BaseModel):
    model_config = ConfigDict(extra="ignore", use_enum_values=True)
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    request_number: str = ""
    patient_name: str
    hospital_name: str
    contact_number: str
    blood_group: BloodGroup
    units_required: int = 1
    urgency: Urgency = Urgency.MEDIUM
    district: District
    additional_notes: str = ""
    contacted_donors: List[ContactEntry] = []
    search_session: SearchSession = Field(default_factory=SearchSession)
    status: RequestStatus = RequestStatus.PENDING
    submitted_by_ip: Optional[str] = None
    submitted_by_user_agent: Optional[str] = None
    requested_at: str = Field(default_factory=utc_now_iso)
    fulfilled_at: Optional[str] = None
    last_updated: str = Field(default_factory=utc_now_iso)

class BloodRequestCreate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)
    patient_name: str = Field(min_length=1)
    hospital_name: str = Field(min_length=1)
    contact_number: str = Field(pattern=PHONE_PATTERN)
    blood_group: BloodGroup
    units_required: int = Field(default=1, ge=1, le=10)
    urgency: Urgency = Urgency.MEDIUM
    district: District
    additional_notes: str = ""
    session_id: Optional[str] = None
    current_page: int = Field(default=1, ge=1)

    @field_validator("patient_name")
    @classmethod
    def upper_patient_name(cls, v: str) -> str:
        return v.upper()

    @field_validator("additional_notes", mode="before")
    @classmethod
    def none_notes_is_blank(cls, v):
        return v or ""

class DonorStatusChange(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
    donor_id: str
    status: ContactStatus
    notes: Optional[str] = None

class BatchStatusChange(BaseModel):
    updates: List[DonorStatusChange] = Field(min_length=1)

class RequestCompletion(BaseModel):
    status: RequestStatus = RequestStatus.FULFILLED
    notes: Optional[str] = None
