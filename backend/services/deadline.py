import asyncio
import functools
import logging
from typing import Optional

from pymongo.errors import AutoReconnect

from config import settings
from .errors import StorageUnavailable

logger = logging.getLogger(__name__)


def with_deadline(func):
    """Run a storage-bound coroutine under a caller-supplied deadline.

    The wrapped coroutine gains a keyword-only ``timeout`` in seconds,
    defaulting to ``DB_TIMEOUT_SECONDS``. Timeouts and lost connections are
    raised as StorageUnavailable.
    """
    @functools.wraps(func)
    async def wrapper(*args, timeout: Optional[float] = None, **kwargs):
        limit = settings.DB_TIMEOUT_SECONDS if timeout is None else timeout
        try:
            return await asyncio.wait_for(func(*args, **kwargs), limit)
        except asyncio.TimeoutError as exc:
            logger.warning(f"{func.__qualname__} exceeded its {limit}s deadline")
            raise StorageUnavailable(f"Operation timed out after {limit}s") from exc
        except AutoReconnect as exc:
            logger.warning(f"{func.__qualname__} lost the database connection: {exc}")
            raise StorageUnavailable("Database temporarily unavailable") from exc
    return wrapper
