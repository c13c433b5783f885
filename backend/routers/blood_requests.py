from fastapi import APIRouter, Depends, Query, Request
from typing import Optional

from models import (
    BatchStatusChange, BloodGroup, BloodRequestCreate, District,
    DonorStatusChange, MAX_PAGE, RequestCompletion, RequestStatus
)
from services import (
    ContactLedger, DonorDirectory, MatchingEngine, PaginationCursor, RequestQueries,
    ValidationFailed, get_contact_ledger, get_donor_directory, get_matching_engine,
    get_pagination_cursor, get_request_queries
)
from .serializers import camelize, donor_summary

router = APIRouter(prefix="/blood-requests", tags=["Blood Requests"])


def _client_ip(request: Request) -> Optional[str]:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


def _page_number(raw: str) -> int:
    try:
        page = int(raw) or 1
    except ValueError:
        return 1
    return max(-MAX_PAGE, min(page, MAX_PAGE))

@router.post("/create", status_code=201)
async def create_blood_request(
    data: BloodRequestCreate,
    request: Request,
    engine: MatchingEngine = Depends(get_matching_engine)
):
    result = await engine.create_request(
        data,
        submitted_by_ip=_client_ip(request),
        submitted_by_user_agent=request.headers.get("user-agent", "")[:500] or None,
    )
    blood_request = result["request"]
    return {
        "success": True,
        "message": "Blood request created successfully",
        "requestId": blood_request.id,
        "requestNumber": blood_request.request_number,
        "donors": [
            donor_summary(donor, "phone", "blood_group", "availability", "last_updated")
            for donor in result["donors"]
        ],
        "pagination": camelize(result["pagination"]),
    }

@router.get("/search/available")
async def search_available_donors(
    district: Optional[District] = None,
    blood_group: Optional[BloodGroup] = Query(None, alias="bloodGroup"),
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(5, ge=1, le=100),
    directory: DonorDirectory = Depends(get_donor_directory)
):
    if not district or not blood_group:
        raise ValidationFailed("District and blood group are required")

    result = await directory.search_available(district.value, blood_group.value, page=page, limit=limit)
    return {
        "success": True,
        "donors": [
            donor_summary(donor, "phone", "blood_group", "district", "availability", "last_updated")
            for donor in result["donors"]
        ],
        "availableCount": result["available_count"],
        "currentPage": result["current_page"],
        "totalPages": result["total_pages"],
    }

@router.get("/phone/{phone_number}")
async def get_request_by_phone(phone_number: str, queries: RequestQueries = Depends(get_request_queries)):
    summary = await queries.latest_by_phone(phone_number)
    return {"success": True, "request": camelize(summary)}

@router.get("")
async def list_blood_requests(
    status: Optional[RequestStatus] = None,
    district: Optional[District] = None,
    blood_group: Optional[BloodGroup] = Query(None, alias="bloodGroup"),
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(20, ge=1, le=100),
    queries: RequestQueries = Depends(get_request_queries)
):
    result = await queries.list_requests(
        status=status.value if status else None,
        district=district.value if district else None,
        blood_group=blood_group.value if blood_group else None,
        page=page,
        limit=limit,
    )
    return {"success": True, **camelize(result)}

@router.get("/{request_id}/donors/{page}")
async def get_request_donors_page(
    request_id: str,
    page: str,
    cursor: PaginationCursor = Depends(get_pagination_cursor)
):
    result = await cursor.get_page(request_id, _page_number(page))
    return {"success": True, **camelize(result)}

@router.post("/{request_id}/update-donor-status")
async def update_donor_status(
    request_id: str,
    data: DonorStatusChange,
    ledger: ContactLedger = Depends(get_contact_ledger)
):
    await ledger.update_status(request_id, data.donor_id, data.status, data.notes)
    return {"success": True, "message": "Donor status updated successfully"}

@router.post("/{request_id}/batch-update-status")
async def batch_update_donor_status(
    request_id: str,
    data: BatchStatusChange,
    ledger: ContactLedger = Depends(get_contact_ledger)
):
    updated_count = await ledger.update_status_batch(request_id, data.updates)
    return {
        "success": True,
        "message": "Batch update completed successfully",
        "updatedCount": updated_count,
    }

@router.post("/{request_id}/complete")
async def complete_blood_request(
    request_id: str,
    data: Optional[RequestCompletion] = None,
    ledger: ContactLedger = Depends(get_contact_ledger)
):
    data = data or RequestCompletion()
    completed = await ledger.complete(request_id, data.status, data.notes)
    return {
        "success": True,
        "message": f"Blood request marked as {data.status.value}",
        "requestNumber": completed["request_number"],
    }

@router.get("/{request_id}")
async def get_blood_request(request_id: str, queries: RequestQueries = Depends(get_request_queries)):
    blood_request = await queries.get_request(request_id)
    return {"success": True, "request": camelize(blood_request)}
