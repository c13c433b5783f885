import pytest
from pydantic import ValidationError
from pymongo.errors import DuplicateKeyError

from models import Availability, DonorContactOutcome, DonorCreate
from services import ConflictError, NotFoundError, ValidationFailed


def registration(**overrides):
    fields = {
        "full_name": "Meena S",
        "email": "Meena@Example.com ",
        "phone": "9000000001",
        "age": 34,
        "gender": "Female",
        "blood_group": "B+",
        "district": "Madurai",
    }
    fields.update(overrides)
    return DonorCreate(**fields)


async def test_register_normalizes_email(directory, db):
    donor = await directory.register(registration())
    assert donor.email == "meena@example.com"
    assert donor.availability == "available"
    assert donor.is_active and donor.willing_to_donate

    stored = await db.donors.find_one({"id": donor.id}, {"_id": 0})
    assert stored["email"] == "meena@example.com"
    assert stored["medical_conditions"] == ""


async def test_duplicate_email_is_case_insensitive(directory):
    await directory.register(registration())
    with pytest.raises(ConflictError):
        await directory.register(registration(email="MEENA@example.COM", phone="9000000002"))


async def test_duplicate_phone_conflicts(directory):
    await directory.register(registration())
    with pytest.raises(ConflictError):
        await directory.register(registration(email="other@example.com"))


async def test_unique_index_rejects_duplicates_written_directly(make_donor):
    await make_donor(email="taken@example.com")
    with pytest.raises(DuplicateKeyError):
        await make_donor(email="taken@example.com")


@pytest.mark.parametrize("overrides", [
    {"age": 17},
    {"age": 66},
    {"phone": "12345"},
    {"phone": "98765abcde"},
    {"blood_group": "C+"},
    {"district": "Bengaluru"},
    {"gender": "Unknown"},
    {"email": "not-an-email"},
    {"emergency_contact": "123"},
])
def test_invalid_registration_fields(overrides):
    with pytest.raises(ValidationError):
        registration(**overrides)


async def test_find_eligible_filters_exact_matches(directory, make_donor):
    match = await make_donor()
    await make_donor(district="Salem")
    await make_donor(blood_group="O-")
    await make_donor(is_active=False)
    await make_donor(willing_to_donate=False)

    donors = await directory.find_eligible_donors("Chennai", "O+", 50)
    assert [d["id"] for d in donors] == [match["id"]]


async def test_find_eligible_orders_available_first_then_recent(directory, make_donor):
    old_available = await make_donor(last_updated="2026-01-01T00:00:00.000000+00:00")
    unavailable = await make_donor(availability="unavailable", last_updated="2026-03-01T00:00:00.000000+00:00")
    new_available = await make_donor(last_updated="2026-02-01T00:00:00.000000+00:00")
    other = await make_donor(availability="other", last_updated="2026-01-15T00:00:00.000000+00:00")

    donors = await directory.find_eligible_donors("Chennai", "O+", 50)
    assert [d["id"] for d in donors] == [
        new_available["id"], old_available["id"], other["id"], unavailable["id"]
    ]


async def test_recently_donated_donors_are_not_filtered(directory, make_donor):
    await make_donor(last_donation_date="2026-10-01T00:00:00.000000+00:00")
    donors = await directory.find_eligible_donors("Chennai", "O+", 50)
    assert len(donors) == 1


async def test_find_eligible_truncates_to_limit(directory, make_donor):
    for _ in range(4):
        await make_donor()
    assert len(await directory.find_eligible_donors("Chennai", "O+", 3)) == 3
    assert await directory.find_eligible_donors("Chennai", "O+", 0) == []


async def test_update_availability(directory, db, make_donor):
    donor = await make_donor()
    await directory.update_availability(donor["id"], Availability.UNAVAILABLE)
    stored = await db.donors.find_one({"id": donor["id"]})
    assert stored["availability"] == "unavailable"
    assert stored["last_updated"] >= donor["last_updated"]


async def test_update_availability_unknown_donor(directory):
    with pytest.raises(NotFoundError):
        await directory.update_availability("missing", Availability.AVAILABLE)


async def test_search_reports_eligibility_without_filtering(directory, make_donor):
    await make_donor(last_donation_date="2000-01-01T00:00:00.000000+00:00")
    await make_donor(last_donation_date="2099-01-01T00:00:00.000000+00:00")
    await make_donor()

    result = await directory.search("Chennai", "O+", page=1, limit=2)
    assert result["total_donors"] == 3
    assert result["total_pages"] == 2
    assert len(result["donors"]) == 2
    # never-donated first
    assert result["donors"][0]["last_donation_date"] is None
    assert all(d["is_eligible"] for d in result["donors"])

    second = await directory.search("Chennai", "O+", page=2, limit=2)
    assert second["donors"][0]["is_eligible"] is False


async def test_search_available_counts_available(directory, make_donor):
    await make_donor()
    await make_donor(availability="unavailable")
    result = await directory.search_available("Chennai", "O+")
    assert result["available_count"] == 1
    assert result["total_pages"] == 1
    assert result["donors"][0]["availability"] == "available"


async def test_record_contact_donated_recently(directory, db, make_donor):
    donor = await make_donor()
    updated = await directory.record_contact(donor["id"], DonorContactOutcome.DONATED_RECENTLY)
    assert updated["last_donation_date"] is not None

    contacted = await make_donor()
    updated = await directory.record_contact(contacted["id"], DonorContactOutcome.CONTACTED)
    assert updated["last_donation_date"] is None


async def test_record_contact_unknown_donor(directory):
    with pytest.raises(NotFoundError):
        await directory.record_contact("missing", DonorContactOutcome.CONTACTED)


async def test_deactivated_donor_is_kept_but_not_matched(directory, db, make_donor):
    donor = await make_donor()
    await directory.deactivate(donor["id"])
    assert await db.donors.count_documents({"id": donor["id"]}) == 1
    assert await directory.find_eligible_donors("Chennai", "O+", 50) == []


async def test_register_accepts_wire_payload(directory):
    donor = await directory.register({
        "fullName": "Prakash V",
        "email": "prakash@example.com",
        "phone": "9000000077",
        "age": 41,
        "gender": "Male",
        "bloodGroup": "AB-",
        "district": "Vellore",
        "lastDonationDate": "2026-01-15T00:00:00",
    })
    assert donor.blood_group == "AB-"
    assert donor.last_donation_date == "2026-01-15T00:00:00.000000+00:00"


async def test_register_invalid_payload_raises_validation_failed(directory):
    with pytest.raises(ValidationFailed) as exc_info:
        await directory.register({"fullName": "X", "email": "x@example.com", "phone": "1", "age": 12})
    messages = exc_info.value.errors
    assert any(message.startswith("phone") for message in messages)
    assert any(message.startswith("age") for message in messages)


async def test_donation_dates_are_stored_in_utc_and_sort_by_instant(directory, db):
    # 21:30Z on the 31st, half an hour before the second donor
    ahead = await directory.register(registration(
        email="ahead@example.com", phone="9000000011",
        last_donation_date="2024-01-01T03:00:00+05:30",
    ))
    behind = await directory.register(registration(
        email="behind@example.com", phone="9000000012",
        last_donation_date="2023-12-31T22:00:00+00:00",
    ))

    stored = await db.donors.find_one({"id": ahead.id}, {"_id": 0})
    assert stored["last_donation_date"] == "2023-12-31T21:30:00.000000+00:00"

    result = await directory.search("Madurai", "B+")
    assert [d["id"] for d in result["donors"]] == [ahead.id, behind.id]


def test_blank_optional_fields_become_none():
    data = registration(last_donation_date="", emergency_contact="  ")
    assert data.last_donation_date is None
    assert data.emergency_contact is None
