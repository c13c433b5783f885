from fastapi import APIRouter, Depends, Query
from typing import Optional

from models import BloodGroup, DonorCreate, DonorContact, District, MAX_PAGE
from services import DonorDirectory, ValidationFailed, get_donor_directory
from .serializers import camelize, donor_summary

router = APIRouter(prefix="/donors", tags=["Donors"])

@router.post("/register", status_code=201)
async def register_donor(data: DonorCreate, directory: DonorDirectory = Depends(get_donor_directory)):
    donor = await directory.register(data)
    return {
        "success": True,
        "message": "Donor registered successfully",
        "donor": camelize(donor.model_dump(mode="json")),
    }

@router.get("/search")
async def search_donors(
    district: Optional[District] = None,
    blood_group: Optional[BloodGroup] = Query(None, alias="bloodGroup"),
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(5, ge=1, le=100),
    directory: DonorDirectory = Depends(get_donor_directory)
):
    if not district or not blood_group:
        raise ValidationFailed("District and blood group are required")

    result = await directory.search(district.value, blood_group.value, page=page, limit=limit)
    return {
        "success": True,
        "page": result["page"],
        "totalPages": result["total_pages"],
        "totalDonors": result["total_donors"],
        "donors": [
            donor_summary(donor, "phone", "blood_group", "district", "last_donation_date", "is_eligible")
            for donor in result["donors"]
        ],
    }

@router.post("/{donor_id}/contact")
async def record_donor_contact(
    donor_id: str,
    data: DonorContact,
    directory: DonorDirectory = Depends(get_donor_directory)
):
    donor = await directory.record_contact(donor_id, data.status)
    return {
        "success": True,
        "message": f"Donor marked as {data.status.value}",
        "donor": camelize(donor),
    }

@router.post("/{donor_id}/deactivate")
async def deactivate_donor(donor_id: str, directory: DonorDirectory = Depends(get_donor_directory)):
    await directory.deactivate(donor_id)
    return {"success": True, "message": "Donor deactivated"}
