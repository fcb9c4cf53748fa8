"""
Transaction helpers for ledger writes.

Every balance or event-log mutation runs through ``run_in_transaction`` so the
commit, the rollback on failure and the bounded retry on lock/serialization
conflicts are handled in one place.
"""
import asyncio
import logging
from contextlib import contextmanager
from typing import Awaitable, Callable, Iterator, Optional, TypeVar

from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession

from canteen.core.config import settings
from canteen.core.exceptions import ConcurrentUpdateConflict, TransientFailureError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# postgres: serialization_failure, deadlock_detected, lock_not_available
_RETRIABLE_SQLSTATES = {"40001", "40P01", "55P03"}
_RETRIABLE_MESSAGES = ("database is locked", "database table is locked", "could not serialize access")


def is_concurrency_conflict(exc: DBAPIError) -> bool:
    """Tell lock/serialization failures apart from every other database error."""
    orig = getattr(exc, "orig", None)
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate in _RETRIABLE_SQLSTATES:
        return True
    message = str(orig or exc).lower()
    return any(fragment in message for fragment in _RETRIABLE_MESSAGES)


@contextmanager
def conflicts_as_retriable() -> Iterator[None]:
    """Re-raise lock/serialization failures as ``ConcurrentUpdateConflict``."""
    try:
        yield
    except DBAPIError as e:
        if is_concurrency_conflict(e):
            raise ConcurrentUpdateConflict(str(e.orig or e)) from e
        raise


async def run_in_transaction(
    session: AsyncSession,
    work: Callable[[], Awaitable[T]],
    description: str,
    max_attempts: Optional[int] = None,
) -> T:
    """
    Run ``work`` and commit it as one transaction.

    Conflicts raised by ``work`` or by the commit are retried up to
    ``max_attempts`` times with a linear backoff, then surface as
    ``TransientFailureError``. Any other error rolls the session back and
    propagates unchanged.
    """
    attempts = max_attempts or settings.LEDGER_MAX_RETRIES
    for attempt in range(1, attempts + 1):
        commit_started = False
        try:
            with conflicts_as_retriable():
                result = await work()
                commit_started = True
                # a started commit runs to completion even if the caller goes away
                await asyncio.shield(session.commit())
            return result
        except ConcurrentUpdateConflict as e:
            await session.rollback()
            logger.debug(f"Conflict during {description}: {e}")
        except DBAPIError as e:
            await session.rollback()
            logger.error(f"Database error during {description}: {e}")
            raise
        except asyncio.CancelledError:
            if not commit_started:
                await session.rollback()
            raise
        except Exception:
            await session.rollback()
            raise

        if attempt < attempts:
            logger.warning(f"Concurrent update conflict during {description} (attempt {attempt}/{attempts}), retrying")
            await asyncio.sleep(settings.LEDGER_RETRY_BACKOFF_SECONDS * attempt)

    logger.error(f"Giving up on {description} after {attempts} conflicting attempts")
    raise TransientFailureError()
