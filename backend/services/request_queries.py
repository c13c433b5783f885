"""
Read-side queries over blood requests.
"""
import math
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING

from config import settings
from .deadline import with_deadline
from .donor_directory import DonorDirectory
from .errors import NotFoundError

SUMMARY_FIELDS = (
    "id", "patient_name", "hospital_name", "blood_group", "units_required",
    "district", "urgency", "contact_number", "additional_notes", "requested_at", "status",
)


def _without_audit(request: dict) -> dict:
    session = request.get("search_session")
    if session:
        session.pop("status_updates", None)
    return request


class RequestQueries:

    def __init__(self, db: AsyncIOMotorDatabase, directory: DonorDirectory):
        self.db = db
        self.directory = directory

    @with_deadline
    async def get_request(self, request_id: str) -> dict:
        """Full request with each snapshot entry's donor reference populated."""
        request = await self.db.blood_requests.find_one({"id": request_id}, {"_id": 0})
        if not request:
            raise NotFoundError("Blood request not found")

        entries = request.get("contacted_donors", [])
        donors = await self.directory.get_many(entry["donor_id"] for entry in entries)
        for entry in entries:
            donor = donors.get(entry["donor_id"])
            entry["donor"] = {
                "id": donor["id"],
                "full_name": donor["full_name"],
                "phone": donor["phone"],
                "blood_group": donor["blood_group"],
            } if donor else None
        return request

    @with_deadline
    async def list_requests(
        self,
        status: Optional[str] = None,
        district: Optional[str] = None,
        blood_group: Optional[str] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> dict:
        limit = limit or settings.REQUEST_LIST_LIMIT
        query = {}
        if status:
            query["status"] = status
        if district:
            query["district"] = district
        if blood_group:
            query["blood_group"] = blood_group

        skip = (page - 1) * limit
        requests = await self.db.blood_requests.find(query, {"_id": 0}).sort(
            "requested_at", DESCENDING
        ).skip(skip).limit(limit).to_list(limit)
        total = await self.db.blood_requests.count_documents(query)

        return {
            "count": len(requests),
            "total": total,
            "total_pages": math.ceil(total / limit),
            "current_page": page,
            "requests": [_without_audit(request) for request in requests],
        }

    @with_deadline
    async def latest_by_phone(self, phone: str) -> dict:
        requests = await self.db.blood_requests.find(
            {"contact_number": phone}, {"_id": 0}
        ).sort("requested_at", DESCENDING).limit(1).to_list(1)
        if not requests:
            raise NotFoundError("No blood request found with this phone number")
        return {field: requests[0].get(field) for field in SUMMARY_FIELDS}
