import pytest
from sqlalchemy import delete

from canteen.core.exceptions import EmployeeNotFoundError, InsufficientBalanceError, InvalidAmountError
from canteen.models import Employee
from canteen.models.hr.employee import MAX_TICKET_BALANCE
from canteen.services.hr.balance_ledger_service import BalanceLedgerService
from tests.conftest import fetch_balance


@pytest.mark.asyncio
class TestBalanceLedger:
    """Balance ledger operations"""

    async def test_decrement_one(self, session, session_maker):
        ledger = BalanceLedgerService(session)

        assert await ledger.decrement_one("E-001") == 2
        assert await fetch_balance(session_maker, "E-001") == 2

    async def test_decrement_one_at_zero_fails(self, session, session_maker):
        ledger = BalanceLedgerService(session)

        with pytest.raises(InsufficientBalanceError):
            await ledger.decrement_one("E-003")
        assert await fetch_balance(session_maker, "E-003") == 0

    async def test_decrement_unknown_employee(self, session):
        with pytest.raises(EmployeeNotFoundError):
            await BalanceLedgerService(session).decrement_one("E-999")

    async def test_credit_one(self, session, session_maker):
        ledger = BalanceLedgerService(session)

        assert await ledger.credit_one("E-002", 5) == 7
        assert await fetch_balance(session_maker, "E-002") == 7

    @pytest.mark.parametrize("amount", [0, -1, 2.5, True, "3", MAX_TICKET_BALANCE + 1, 2**63])
    async def test_credit_one_rejects_invalid_amount(self, session, session_maker, amount):
        ledger = BalanceLedgerService(session)

        with pytest.raises(InvalidAmountError):
            await ledger.credit_one("E-002", amount)
        assert await fetch_balance(session_maker, "E-002") == 2

    async def test_credit_then_negative_credit_keeps_balance(self, session, session_maker):
        ledger = BalanceLedgerService(session)

        await ledger.credit_one("E-002", 5)
        with pytest.raises(InvalidAmountError):
            await ledger.credit_one("E-002", -1)
        assert await fetch_balance(session_maker, "E-002") == 7

    async def test_credit_beyond_maximum_balance_fails_without_change(self, session, session_maker):
        ledger = BalanceLedgerService(session)

        with pytest.raises(InvalidAmountError):
            await ledger.credit_one("E-002", MAX_TICKET_BALANCE)
        assert await fetch_balance(session_maker, "E-002") == 2

        assert await ledger.credit_one("E-002", MAX_TICKET_BALANCE - 2) == MAX_TICKET_BALANCE

    async def test_credit_unknown_employee(self, session):
        with pytest.raises(EmployeeNotFoundError):
            await BalanceLedgerService(session).credit_one("E-999", 1)

    async def test_debit(self, session, session_maker):
        ledger = BalanceLedgerService(session)

        assert await ledger.debit("E-004", 3) == 2
        assert await fetch_balance(session_maker, "E-004") == 2

    async def test_debit_more_than_balance_fails_without_change(self, session, session_maker):
        ledger = BalanceLedgerService(session)

        with pytest.raises(InsufficientBalanceError):
            await ledger.debit("E-002", 3)
        assert await fetch_balance(session_maker, "E-002") == 2

    async def test_get_balance(self, session):
        ledger = BalanceLedgerService(session)

        assert await ledger.get_balance("E-004") == 5
        with pytest.raises(EmployeeNotFoundError):
            await ledger.get_balance("E-999")


@pytest.mark.asyncio
class TestBulkCredit:
    """credit_all applies independently per employee"""

    async def test_credit_all(self, session, session_maker):
        result = await BalanceLedgerService(session).credit_all(4)

        assert result.succeeded == 4
        assert result.failed == 0
        balances = {r.employee_id: r.new_balance for r in result.results}
        assert balances == {"E-001": 7, "E-002": 6, "E-003": 4, "E-004": 9}
        assert await fetch_balance(session_maker, "E-003") == 4

    async def test_credit_all_by_department(self, session, session_maker):
        result = await BalanceLedgerService(session).credit_all(10, department="Production")

        assert [r.employee_id for r in result.results] == ["E-001", "E-003"]
        assert await fetch_balance(session_maker, "E-001") == 13
        assert await fetch_balance(session_maker, "E-002") == 2

    async def test_credit_all_rejects_invalid_amount_before_any_change(self, session, session_maker):
        with pytest.raises(InvalidAmountError):
            await BalanceLedgerService(session).credit_all(0)
        assert await fetch_balance(session_maker, "E-001") == 3

    async def test_credit_all_rejects_out_of_range_amount(self, session, session_maker):
        with pytest.raises(InvalidAmountError):
            await BalanceLedgerService(session).credit_all(2**63)
        assert await fetch_balance(session_maker, "E-001") == 3

    async def test_credit_all_reports_employees_that_would_overflow(self, session, session_maker):
        result = await BalanceLedgerService(session).credit_all(MAX_TICKET_BALANCE - 1)

        outcome = {r.employee_id: (r.success, r.error) for r in result.results}
        assert outcome == {
            "E-001": (False, "invalid_amount"),
            "E-002": (False, "invalid_amount"),
            "E-003": (True, None),
            "E-004": (False, "invalid_amount"),
        }
        assert result.succeeded == 1
        assert result.failed == 3
        assert await fetch_balance(session_maker, "E-003") == MAX_TICKET_BALANCE - 1
        assert await fetch_balance(session_maker, "E-004") == 5

    async def test_employee_deleted_mid_run_does_not_stop_the_rest(self, session, session_maker):
        class DeletingLedger(BalanceLedgerService):
            async def credit_one(self, employee_id, amount):
                if employee_id == "E-002":
                    async with session_maker() as other:
                        await other.execute(delete(Employee).where(Employee.id == "E-002"))
                        await other.commit()
                return await super().credit_one(employee_id, amount)

        result = await DeletingLedger(session).credit_all(2)

        outcome = {r.employee_id: r for r in result.results}
        assert result.succeeded == 3
        assert result.failed == 1
        assert outcome["E-002"].success is False
        assert outcome["E-002"].error == "employee_not_found"
        assert outcome["E-004"].new_balance == 7
        assert await fetch_balance(session_maker, "E-001") == 5
