"""
Donor Directory
Registration, lookup and availability tracking for donor records.
"""
import logging
import math
from typing import Dict, Iterable, List, Union

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from models import Availability, Donor, DonorCreate, DonorContactOutcome, utc_now_iso
from .deadline import with_deadline
from .eligibility import MATCH_ORDER, SEARCH_ORDER, is_eligible
from .errors import ConflictError, NotFoundError, validate

logger = logging.getLogger(__name__)

DUPLICATE_DONOR = "Donor with this email or phone already exists"


class DonorDirectory:

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db

    @staticmethod
    def _active_query(district: str, blood_group: str) -> dict:
        return {
            "district": district,
            "blood_group": blood_group,
            "is_active": True,
            "willing_to_donate": True,
        }

    @with_deadline
    async def register(self, data: Union[DonorCreate, dict]) -> Donor:
        """Create a donor. Email (already lower-cased) and phone must be unused."""
        data = validate(DonorCreate, data)
        existing = await self.db.donors.find_one(
            {"$or": [{"email": data.email}, {"phone": data.phone}]},
            {"_id": 0, "id": 1}
        )
        if existing:
            raise ConflictError(DUPLICATE_DONOR)

        payload = data.model_dump(mode="json")
        payload["medical_conditions"] = payload.get("medical_conditions") or ""
        if data.last_donation_date:
            payload["last_donation_date"] = data.last_donation_date.isoformat(timespec="microseconds")
        donor = Donor(**payload)

        try:
            await self.db.donors.insert_one(donor.model_dump(mode="json"))
        except DuplicateKeyError as exc:
            # lost a race with a concurrent registration
            raise ConflictError("Duplicate entry. Email or phone already exists") from exc

        logger.info(f"Registered donor {donor.id} ({donor.blood_group}, {donor.district})")
        return donor

    @with_deadline
    async def get_many(self, donor_ids: Iterable[str]) -> Dict[str, dict]:
        ids = list(dict.fromkeys(donor_ids))
        if not ids:
            return {}
        donors = await self.db.donors.find({"id": {"$in": ids}}, {"_id": 0}).to_list(len(ids))
        return {donor["id"]: donor for donor in donors}

    @with_deadline
    async def find_eligible_donors(self, district: str, blood_group: str, limit: int) -> List[dict]:
        """Active, willing donors in the district with the exact blood group,
        available donors first, most recently updated first within a tag."""
        if limit <= 0:
            return []
        cursor = self.db.donors.find(
            self._active_query(district, blood_group), {"_id": 0}
        ).sort(MATCH_ORDER).limit(limit)
        return await cursor.to_list(limit)

    @with_deadline
    async def search(self, district: str, blood_group: str, page: int = 1, limit: int = 5) -> dict:
        query = self._active_query(district, blood_group)
        skip = (page - 1) * limit

        donors = await self.db.donors.find(query, {"_id": 0}).sort(SEARCH_ORDER).skip(skip).limit(limit).to_list(limit)
        total = await self.db.donors.count_documents(query)

        for donor in donors:
            donor["is_eligible"] = is_eligible(donor)

        return {
            "page": page,
            "total_pages": math.ceil(total / limit),
            "total_donors": total,
            "donors": donors,
        }

    @with_deadline
    async def search_available(self, district: str, blood_group: str, page: int = 1, limit: int = 5) -> dict:
        query = self._active_query(district, blood_group)
        skip = (page - 1) * limit

        available_count = await self.db.donors.count_documents(
            {**query, "availability": Availability.AVAILABLE.value}
        )
        total = await self.db.donors.count_documents(query)
        donors = await self.db.donors.find(query, {"_id": 0}).sort(MATCH_ORDER).skip(skip).limit(limit).to_list(limit)

        return {
            "donors": donors,
            "available_count": available_count,
            "current_page": page,
            "total_pages": math.ceil(total / limit),
        }

    @with_deadline
    async def update_availability(self, donor_id: str, tag: Availability):
        result = await self.db.donors.update_one(
            {"id": donor_id},
            {"$set": {"availability": Availability(tag).value, "last_updated": utc_now_iso()}}
        )
        if result.matched_count == 0:
            raise NotFoundError("Donor not found")

    @with_deadline
    async def record_contact(self, donor_id: str, outcome: DonorContactOutcome) -> dict:
        """Record a contact outcome on the donor alone, outside any request."""
        now = utc_now_iso()
        update_data = {"last_updated": now}
        if DonorContactOutcome(outcome) == DonorContactOutcome.DONATED_RECENTLY:
            update_data["last_donation_date"] = now

        result = await self.db.donors.update_one({"id": donor_id}, {"$set": update_data})
        if result.matched_count == 0:
            raise NotFoundError("Donor not found")

        return await self.db.donors.find_one(
            {"id": donor_id},
            {"_id": 0, "id": 1, "full_name": 1, "phone": 1, "last_donation_date": 1}
        )

    @with_deadline
    async def deactivate(self, donor_id: str):
        result = await self.db.donors.update_one(
            {"id": donor_id},
            {"$set": {"is_active": False, "last_updated": utc_now_iso()}}
        )
        if result.matched_count == 0:
            raise NotFoundError("Donor not found")
        logger.info(f"Deactivated donor {donor_id}")
