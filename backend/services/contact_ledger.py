"""
Contact Ledger
Per-request outreach status for each donor in the request's snapshot, an
append-only audit trail of transitions, and the request lifecycle.

Snapshot membership is fixed when the request is created; only the status
fields of existing entries change here. Mutations of one request are
serialized through a per-request lock so concurrent updates are not lost.
"""
import logging
from typing import Iterable, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from models import (
    Availability, ContactStatus, DonorStatusChange, RequestStatus,
    StatusUpdate, utc_now_iso
)
from .deadline import with_deadline
from .donor_directory import DonorDirectory
from .errors import NotFoundError, ValidationFailed, validate
from .locks import KeyedLock

logger = logging.getLogger(__name__)

request_locks = KeyedLock()


def availability_for_status(status: ContactStatus) -> Availability:
    status = ContactStatus(status)
    if status == ContactStatus.CONFIRMED:
        return Availability.AVAILABLE
    if status in (ContactStatus.DECLINED, ContactStatus.UNAVAILABLE):
        return Availability.UNAVAILABLE
    return Availability.OTHER


class ContactLedger:

    def __init__(self, db: AsyncIOMotorDatabase, directory: DonorDirectory, locks: Optional[KeyedLock] = None):
        self.db = db
        self.directory = directory
        self.locks = locks or request_locks

    async def _load(self, request_id: str) -> dict:
        request = await self.db.blood_requests.find_one(
            {"id": request_id},
            {"_id": 0, "id": 1, "status": 1, "contacted_donors": 1, "additional_notes": 1, "requested_at": 1}
        )
        if not request:
            raise NotFoundError("Blood request not found")
        return request

    @staticmethod
    def _find_entry(entries: List[dict], donor_id: str) -> Optional[dict]:
        for entry in entries:
            if entry["donor_id"] == donor_id:
                return entry
        return None

    @staticmethod
    def _apply(entry: dict, change: DonorStatusChange, now: str) -> dict:
        """Mutate ``entry`` in place and return the audit record."""
        old_status = entry.get("contact_status")
        new_status = ContactStatus(change.status)

        entry["contact_status"] = new_status.value
        entry["contact_time"] = now
        if change.notes:
            entry["notes"] = change.notes

        return StatusUpdate(
            donor_id=entry["donor_id"],
            old_status=old_status,
            new_status=new_status,
            updated_at=now,
        ).model_dump(mode="json")

    async def _persist(self, request: dict, audit: List[dict], now: str):
        update = {
            "$set": {"contacted_donors": request["contacted_donors"], "last_updated": now},
        }
        if audit:
            update["$push"] = {"search_session.status_updates": {"$each": audit}}
            if request.get("status") == RequestStatus.PENDING.value:
                update["$set"]["status"] = RequestStatus.IN_PROGRESS.value
        await self.db.blood_requests.update_one({"id": request["id"]}, update)

    async def _mirror(self, audit: List[dict]):
        """Copy applied transitions onto donor availability, after the ledger is saved."""
        for record in audit:
            await self.directory.update_availability(
                record["donor_id"], availability_for_status(record["new_status"])
            )

    @with_deadline
    async def update_status(self, request_id: str, donor_id: str, status: ContactStatus, notes: Optional[str] = None):
        change = validate(DonorStatusChange, {"donor_id": donor_id, "status": status, "notes": notes})
        async with self.locks.hold(request_id):
            request = await self._load(request_id)
            entry = self._find_entry(request.get("contacted_donors", []), donor_id)
            if entry is None:
                raise NotFoundError("Donor not found in this request")

            now = utc_now_iso()
            audit = [self._apply(entry, change, now)]
            await self._persist(request, audit, now)
            await self._mirror(audit)

        logger.info(f"Request {request_id}: donor {donor_id} {audit[0]['old_status']} -> {audit[0]['new_status']}")

    @with_deadline
    async def update_status_batch(self, request_id: str, updates: Iterable[DonorStatusChange]) -> int:
        """Apply each update whose donor belongs to the snapshot.

        Updates naming a donor outside the snapshot are skipped without error.
        The return value is the number of updates submitted, not applied.
        """
        updates = [validate(DonorStatusChange, update) for update in updates or []]
        if not updates:
            raise ValidationFailed("Updates array is required")

        async with self.locks.hold(request_id):
            request = await self._load(request_id)
            entries = request.get("contacted_donors", [])

            now = utc_now_iso()
            audit = []
            for change in updates:
                entry = self._find_entry(entries, change.donor_id)
                if entry is None:
                    logger.debug(f"Request {request_id}: skipping donor {change.donor_id}, not in snapshot")
                    continue
                audit.append(self._apply(entry, change, now))

            await self._persist(request, audit, now)
            await self._mirror(audit)

        logger.info(f"Request {request_id}: batch of {len(updates)} updates, {len(audit)} applied")
        return len(updates)

    @with_deadline
    async def complete(self, request_id: str, status: RequestStatus = RequestStatus.FULFILLED, notes: Optional[str] = None) -> dict:
        """Close out a request. The caller asserts the outcome; no confirmed
        donor is required for ``fulfilled``."""
        try:
            status = RequestStatus(status)
        except ValueError as exc:
            raise ValidationFailed(errors=[f"status: {exc}"]) from exc
        async with self.locks.hold(request_id):
            request = await self._load(request_id)
            now = utc_now_iso()

            update_data = {"status": status.value, "last_updated": now}
            if status == RequestStatus.FULFILLED:
                update_data["fulfilled_at"] = now
            if notes:
                update_data["additional_notes"] = f"{request.get('additional_notes', '')}\n[Completion Notes]: {notes}"

            await self.db.blood_requests.update_one({"id": request_id}, {"$set": update_data})

        logger.info(f"Request {request_id} marked as {status.value}")
        return await self.db.blood_requests.find_one(
            {"id": request_id},
            {"_id": 0, "id": 1, "request_number": 1, "status": 1, "fulfilled_at": 1, "requested_at": 1, "additional_notes": 1}
        )
