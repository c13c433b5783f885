from .enums import (
    BloodGroup, Gender, District, Availability, DonorContactOutcome,
    Urgency, RequestStatus, ContactStatus
)
from .donor import Donor, DonorCreate, DonorContact, utc_now_iso
from .request import (
    BloodRequest, BloodRequestCreate, ContactEntry, StatusUpdate, SearchSession, MAX_PAGE,
    DonorStatusChange, BatchStatusChange, RequestCompletion, DONORS_PER_PAGE
)
