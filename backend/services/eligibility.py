"""
Donation eligibility and donor ordering.

Eligibility is advisory: it is reported alongside search results but never
used to drop a donor from a result set.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from pymongo import ASCENDING, DESCENDING

from config import settings

DONATION_INTERVAL = timedelta(days=settings.DONATION_INTERVAL_DAYS)

# "available" < "other" < "unavailable", so ascending puts available donors first
MATCH_ORDER = [("availability", ASCENDING), ("last_updated", DESCENDING)]
# null last_donation_date sorts first: donors who never donated lead
SEARCH_ORDER = [("last_donation_date", ASCENDING)]


def _parse(value: Union[str, datetime, None]) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def is_eligible(donor: dict, now: Optional[datetime] = None) -> bool:
    last_donation = _parse(donor.get("last_donation_date"))
    if last_donation is None:
        return True
    now = now or datetime.now(timezone.utc)
    return now - last_donation > DONATION_INTERVAL
