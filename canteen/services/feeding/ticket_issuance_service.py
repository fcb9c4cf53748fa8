import logging
from datetime import datetime, timezone
from sqlalchemy.ext.asyncio import AsyncSession

from canteen.core.exceptions import InsufficientBalanceError, NoTicketsAvailableError
from canteen.schemas.feeding.ticket_schema import TicketResponse
from canteen.services.biometric.scanner import ScanCapability
from canteen.services.feeding.feeding_event_service import FeedingEventService
from canteen.services.hr.balance_ledger_service import BalanceLedgerService
from canteen.utils.db_retry import run_in_transaction

logger = logging.getLogger(__name__)


def generate_ticket_id(issued_at: datetime, event_id: int) -> str:
    """Ticket number in format: TKT-YYYYMMDDHHMMSSffffff-XXXXXX"""
    return f"TKT-{issued_at.strftime('%Y%m%d%H%M%S%f')}-{event_id:06d}"


class TicketIssuanceService:
    """
    Turns an identified employee into one printed meal ticket.

    The balance decrement and the feeding event are written in the same
    database transaction: either both are committed or neither is.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.ledger = BalanceLedgerService(session)
        self.feeding_log = FeedingEventService(session)

    async def issue(self, employee_id: str) -> TicketResponse:
        async def work() -> TicketResponse:
            try:
                row = await self.ledger.decrement_in_transaction(employee_id)
            except InsufficientBalanceError:
                raise NoTicketsAvailableError(employee_id)

            issued_at = datetime.now(timezone.utc)
            event = await self.feeding_log.append(
                employee_id=employee_id,
                employee_name=row.name,
                department=row.department,
                timestamp=issued_at,
            )
            return TicketResponse(
                ticket_id=generate_ticket_id(issued_at, event.id),
                employee_id=employee_id,
                employee_name=row.name,
                department=row.department,
                timestamp=issued_at,
                remaining_balance=row.ticket_balance,
            )

        ticket = await run_in_transaction(self.session, work, f"ticket issuance for {employee_id}")
        logger.info(f"🎫 Ticket {ticket.ticket_id} issued to {employee_id}; {ticket.remaining_balance} left")
        return ticket

    async def scan_and_issue(self, scanner: ScanCapability) -> TicketResponse:
        """Identify the employee first; scanner failures propagate and nothing is issued."""
        employee_id = await scanner.identify()
        return await self.issue(employee_id)
