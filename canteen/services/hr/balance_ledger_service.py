import logging
from typing import List, Optional
from sqlalchemy import select, update
from sqlalchemy.engine import Row
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from canteen.core.exceptions import (
    BaseAppException,
    EmployeeNotFoundError,
    InsufficientBalanceError,
    InvalidAmountError,
)
from canteen.models.hr.employee import MAX_TICKET_BALANCE, Employee
from canteen.schemas.hr.balance_schema import BulkCreditResponse, CreditResult
from canteen.utils.db_retry import run_in_transaction

logger = logging.getLogger(__name__)


def _validate_amount(amount) -> int:
    if isinstance(amount, bool) or not isinstance(amount, int) or not 0 < amount <= MAX_TICKET_BALANCE:
        raise InvalidAmountError(amount)
    return amount


class BalanceLedgerService:
    """
    Atomic mutations of a single employee's ticket balance.

    Each change is one conditional UPDATE ... RETURNING, so the balance check
    and the write happen in the same statement and concurrent callers can
    never both spend the last ticket.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    # ---------- Helpers ----------
    async def _ensure_exists(self, employee_id: str) -> None:
        result = await self.session.execute(
            select(Employee.id).where(Employee.id == employee_id)
        )
        if result.scalar_one_or_none() is None:
            raise EmployeeNotFoundError(employee_id)

    async def _apply_delta(self, employee_id: str, delta: int) -> Optional[Row]:
        stmt = (
            update(Employee)
            .where(Employee.id == employee_id)
            .values(ticket_balance=Employee.ticket_balance + delta)
            .returning(Employee.ticket_balance, Employee.name, Employee.department)
            .execution_options(synchronize_session=False)
        )
        if delta < 0:
            stmt = stmt.where(Employee.ticket_balance >= -delta)
        else:
            stmt = stmt.where(Employee.ticket_balance <= MAX_TICKET_BALANCE - delta)
        result = await self.session.execute(stmt)
        return result.one_or_none()

    async def _withdraw(self, employee_id: str, amount: int) -> Row:
        row = await self._apply_delta(employee_id, -amount)
        if row is None:
            await self._ensure_exists(employee_id)
            raise InsufficientBalanceError(
                f"Employee '{employee_id}' does not have {amount} ticket(s) to spend"
            )
        return row

    async def decrement_in_transaction(self, employee_id: str) -> Row:
        """
        Spend one ticket inside the caller's open transaction.

        Returns the row ``(ticket_balance, name, department)`` after the
        decrement. Nothing is committed here.
        """
        return await self._withdraw(employee_id, 1)

    # ---------- Reads ----------
    async def get_balance(self, employee_id: str) -> int:
        result = await self.session.execute(
            select(Employee.ticket_balance).where(Employee.id == employee_id)
        )
        balance = result.scalar_one_or_none()
        if balance is None:
            raise EmployeeNotFoundError(employee_id)
        return balance

    # ---------- Writes ----------
    async def decrement_one(self, employee_id: str) -> int:
        async def work():
            row = await self._withdraw(employee_id, 1)
            return row.ticket_balance

        new_balance = await run_in_transaction(self.session, work, f"decrement of {employee_id}")
        logger.info(f"Ticket spent by {employee_id}; balance now {new_balance}")
        return new_balance

    async def debit(self, employee_id: str, amount: int) -> int:
        """Remove ``amount`` tickets; fails rather than going below zero."""
        amount = _validate_amount(amount)

        async def work():
            row = await self._withdraw(employee_id, amount)
            return row.ticket_balance

        new_balance = await run_in_transaction(self.session, work, f"debit of {employee_id}")
        logger.info(f"Debited {amount} ticket(s) from {employee_id}; balance now {new_balance}")
        return new_balance

    async def credit_one(self, employee_id: str, amount: int) -> int:
        amount = _validate_amount(amount)

        async def work():
            row = await self._apply_delta(employee_id, amount)
            if row is None:
                await self._ensure_exists(employee_id)
                raise InvalidAmountError(
                    amount, f"Crediting {amount} ticket(s) would exceed the maximum balance for '{employee_id}'"
                )
            return row.ticket_balance

        new_balance = await run_in_transaction(self.session, work, f"credit of {employee_id}")
        logger.info(f"Credited {amount} ticket(s) to {employee_id}; balance now {new_balance}")
        return new_balance

    async def credit_all(self, amount: int, department: Optional[str] = None) -> BulkCreditResponse:
        """
        Credit every employee (optionally one department) independently.

        Each employee gets its own transaction; a failure for one employee is
        recorded in the result list and the run continues.
        """
        amount = _validate_amount(amount)

        query = select(Employee.id).order_by(Employee.id)
        if department:
            query = query.where(Employee.department == department)
        result = await self.session.execute(query)
        employee_ids: List[str] = list(result.scalars().all())
        # release the read transaction before the per-employee writes
        await self.session.commit()

        results: List[CreditResult] = []
        for employee_id in employee_ids:
            try:
                new_balance = await self.credit_one(employee_id, amount)
                results.append(CreditResult(employee_id=employee_id, success=True, new_balance=new_balance))
            except BaseAppException as e:
                logger.warning(f"Bulk credit skipped {employee_id}: {e.detail}")
                results.append(CreditResult(employee_id=employee_id, success=False, error=e.error_code))
            except SQLAlchemyError as e:
                logger.error(f"Bulk credit failed for {employee_id}: {e}")
                results.append(CreditResult(employee_id=employee_id, success=False, error="database_error"))

        succeeded = sum(1 for r in results if r.success)
        logger.info(
            f"Bulk credit of {amount} to {department or 'all employees'}: "
            f"{succeeded} succeeded, {len(results) - succeeded} failed"
        )
        return BulkCreditResponse(
            amount=amount,
            department=department,
            succeeded=succeeded,
            failed=len(results) - succeeded,
            results=results,
        )
