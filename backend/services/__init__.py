from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from database import get_db
from .errors import (
    ServiceError, ValidationFailed, ConflictError, NotFoundError,
    StorageUnavailable, validation_messages
)
from .eligibility import is_eligible
from .donor_directory import DonorDirectory
from .matching import MatchingEngine
from .contact_ledger import ContactLedger, availability_for_status
from .pagination import PaginationCursor, page_slice, pagination_block, total_pages
from .request_queries import RequestQueries
from .request_numbers import generate_request_number


def get_donor_directory(db: AsyncIOMotorDatabase = Depends(get_db)) -> DonorDirectory:
    return DonorDirectory(db)


def get_matching_engine(
    db: AsyncIOMotorDatabase = Depends(get_db),
    directory: DonorDirectory = Depends(get_donor_directory),
) -> MatchingEngine:
    return MatchingEngine(db, directory)


def get_contact_ledger(
    db: AsyncIOMotorDatabase = Depends(get_db),
    directory: DonorDirectory = Depends(get_donor_directory),
) -> ContactLedger:
    return ContactLedger(db, directory)


def get_pagination_cursor(
    db: AsyncIOMotorDatabase = Depends(get_db),
    directory: DonorDirectory = Depends(get_donor_directory),
) -> PaginationCursor:
    return PaginationCursor(db, directory)


def get_request_queries(
    db: AsyncIOMotorDatabase = Depends(get_db),
    directory: DonorDirectory = Depends(get_donor_directory),
) -> RequestQueries:
    return RequestQueries(db, directory)
