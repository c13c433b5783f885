"""
Matching Engine
Selects candidate donors for a new blood request and freezes them onto the
request as its contact snapshot.
"""
import logging
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from config import settings
from models import BloodRequest, BloodRequestCreate, ContactEntry, SearchSession
from .deadline import with_deadline
from .donor_directory import DonorDirectory
from .errors import ConflictError
from .pagination import page_slice, pagination_block, total_pages
from .request_numbers import generate_request_number

logger = logging.getLogger(__name__)

REQUEST_NUMBER_ATTEMPTS = 5


class MatchingEngine:

    def __init__(self, db: AsyncIOMotorDatabase, directory: DonorDirectory, cap: Optional[int] = None):
        self.db = db
        self.directory = directory
        self.cap = settings.MATCH_CAP if cap is None else cap

    async def create_match(self, request: BloodRequest, cap: Optional[int] = None) -> List[dict]:
        """Snapshot up to ``cap`` ordered candidates onto ``request``.

        Every entry starts as ``not_contacted``. No matches is not an error:
        the request simply carries an empty snapshot.
        """
        cap = self.cap if cap is None else cap
        donors = await self.directory.find_eligible_donors(request.district, request.blood_group, cap)

        request.contacted_donors = [ContactEntry(donor_id=donor["id"]) for donor in donors]
        request.search_session.total_pages = total_pages(len(donors))
        return donors

    async def _unused_request_number(self) -> str:
        for _ in range(REQUEST_NUMBER_ATTEMPTS):
            number = generate_request_number()
            if not await self.db.blood_requests.find_one({"request_number": number}, {"_id": 1}):
                return number
        raise ConflictError("Could not allocate a unique request number")

    @with_deadline
    async def create_request(
        self,
        data: BloodRequestCreate,
        submitted_by_ip: Optional[str] = None,
        submitted_by_user_agent: Optional[str] = None,
    ) -> dict:
        request = BloodRequest(
            **data.model_dump(mode="json", exclude={"session_id", "current_page"}),
            submitted_by_ip=submitted_by_ip,
            submitted_by_user_agent=submitted_by_user_agent,
            search_session=SearchSession(
                session_id=data.session_id,
                current_page=data.current_page,
            ),
        )
        donors = await self.create_match(request)

        for _ in range(REQUEST_NUMBER_ATTEMPTS):
            request.request_number = await self._unused_request_number()
            try:
                await self.db.blood_requests.insert_one(request.model_dump(mode="json"))
                break
            except DuplicateKeyError:
                logger.warning(f"Request number {request.request_number} collided, regenerating")
        else:
            raise ConflictError("Could not allocate a unique request number")

        logger.info(
            f"Created blood request {request.request_number} "
            f"({request.blood_group}, {request.district}) with {len(donors)} matched donors"
        )

        page = data.current_page
        return {
            "request": request,
            "donors": page_slice(donors, page),
            "pagination": pagination_block(page, len(donors)),
        }
