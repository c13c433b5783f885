"""Unit tests for eligibility, availability mirroring, paging maths and request numbers."""
import asyncio
import re
from datetime import datetime, timedelta, timezone

import pytest
from pymongo.errors import AutoReconnect

from models import Availability, ContactStatus
from services import (
    StorageUnavailable, availability_for_status, generate_request_number,
    is_eligible, page_slice, pagination_block, total_pages
)
from services.deadline import with_deadline
from services.request_numbers import to_base36

NOW = datetime(2026, 6, 1, tzinfo=timezone.utc)


def test_never_donated_is_eligible():
    assert is_eligible({"last_donation_date": None}, NOW)
    assert is_eligible({}, NOW)


def test_recent_donation_is_not_eligible():
    donated = (NOW - timedelta(days=30)).isoformat()
    assert not is_eligible({"last_donation_date": donated}, NOW)


def test_exactly_ninety_days_is_not_yet_eligible():
    donated = (NOW - timedelta(days=90)).isoformat()
    assert not is_eligible({"last_donation_date": donated}, NOW)


def test_past_ninety_days_is_eligible():
    donated = (NOW - timedelta(days=90, seconds=1)).isoformat()
    assert is_eligible({"last_donation_date": donated}, NOW)


def test_naive_timestamps_are_treated_as_utc():
    assert not is_eligible({"last_donation_date": "2026-05-20T00:00:00"}, NOW)


@pytest.mark.parametrize("status, expected", [
    (ContactStatus.CONFIRMED, Availability.AVAILABLE),
    (ContactStatus.DECLINED, Availability.UNAVAILABLE),
    (ContactStatus.UNAVAILABLE, Availability.UNAVAILABLE),
    (ContactStatus.CONTACTED, Availability.OTHER),
    (ContactStatus.NOT_CONTACTED, Availability.OTHER),
])
def test_availability_mirror(status, expected):
    assert availability_for_status(status) == expected


def test_total_pages():
    assert total_pages(0) == 0
    assert total_pages(5) == 1
    assert total_pages(7) == 2
    assert total_pages(50) == 10


def test_page_slice_bounds():
    items = list(range(7))
    assert page_slice(items, 1) == [0, 1, 2, 3, 4]
    assert page_slice(items, 2) == [5, 6]
    assert page_slice(items, 3) == []
    assert page_slice(items, 0) == []
    assert page_slice(items, -1) == []


def test_pagination_block_flags():
    block = pagination_block(2, 7)
    assert block == {
        "current_page": 2,
        "total_pages": 2,
        "total_donors": 7,
        "has_next_page": False,
        "has_previous_page": True,
    }


def test_request_number_format():
    number = generate_request_number()
    assert re.fullmatch(r"BR-[0-9A-Z]+-[0-9A-Z]{5}", number)
    assert number == number.upper()


def test_to_base36():
    assert to_base36(0) == "0"
    assert to_base36(35) == "Z"
    assert to_base36(36) == "10"


async def test_deadline_exceeded_is_retryable():
    @with_deadline
    async def slow():
        await asyncio.sleep(1)

    with pytest.raises(StorageUnavailable) as exc_info:
        await slow(timeout=0.01)
    assert exc_info.value.retryable
    assert exc_info.value.status_code == 503


async def test_lost_connection_is_retryable():
    @with_deadline
    async def disconnected():
        raise AutoReconnect("connection reset")

    with pytest.raises(StorageUnavailable):
        await disconnected()
