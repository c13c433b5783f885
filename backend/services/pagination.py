"""
Pagination Cursor
Fixed-size pages over a request's frozen donor snapshot. Pages are computed
from the snapshot stored on the request, never from a fresh directory query.
"""
import logging
import math
from typing import List, Sequence

from motor.motor_asyncio import AsyncIOMotorDatabase

from models import DONORS_PER_PAGE
from .deadline import with_deadline
from .donor_directory import DonorDirectory
from .errors import NotFoundError

logger = logging.getLogger(__name__)


def total_pages(count: int, per_page: int = DONORS_PER_PAGE) -> int:
    return math.ceil(count / per_page)


def page_slice(items: Sequence, page: int, per_page: int = DONORS_PER_PAGE) -> List:
    """1-indexed slice; anything outside 1..total_pages is an empty page."""
    if page < 1:
        return []
    start = (page - 1) * per_page
    return list(items[start:start + per_page])


def pagination_block(page: int, count: int, per_page: int = DONORS_PER_PAGE) -> dict:
    pages = total_pages(count, per_page)
    return {
        "current_page": page,
        "total_pages": pages,
        "total_donors": count,
        "has_next_page": page < pages,
        "has_previous_page": page > 1,
    }


class PaginationCursor:

    def __init__(self, db: AsyncIOMotorDatabase, directory: DonorDirectory):
        self.db = db
        self.directory = directory

    @with_deadline
    async def get_page(self, request_id: str, page: int) -> dict:
        request = await self.db.blood_requests.find_one(
            {"id": request_id},
            {"_id": 0, "contacted_donors": 1}
        )
        if not request:
            raise NotFoundError("Blood request not found")

        # last-viewed page is tracked even when it is out of range
        await self.db.blood_requests.update_one(
            {"id": request_id},
            {"$set": {"search_session.current_page": page}}
        )

        snapshot = request.get("contacted_donors", [])
        entries = page_slice(snapshot, page)
        donors = await self.directory.get_many(entry["donor_id"] for entry in entries)

        page_donors = []
        for entry in entries:
            donor = donors.get(entry["donor_id"], {})
            page_donors.append({
                "id": entry["donor_id"],
                "full_name": donor.get("full_name"),
                "phone": donor.get("phone"),
                "blood_group": donor.get("blood_group"),
                "availability": donor.get("availability"),
                "last_updated": donor.get("last_updated"),
                "contact_status": entry["contact_status"],
            })

        logger.debug(f"Request {request_id}: served page {page} ({len(page_donors)} donors)")
        return {
            "donors": page_donors,
            "pagination": pagination_block(page, len(snapshot)),
        }
