from fastapi import APIRouter, Depends

from canteen.api.dependencies import get_ledger_service
from canteen.schemas.hr.balance_schema import (
    BalanceAdjustment,
    BalanceResponse,
    BulkCreditRequest,
    BulkCreditResponse,
)
from canteen.services.hr.balance_ledger_service import BalanceLedgerService

router = APIRouter()

@router.post("/credit-all", response_model=BulkCreditResponse)
async def credit_all(
    data: BulkCreditRequest,
    service: BalanceLedgerService = Depends(get_ledger_service),
):
    """
    Add tickets to every employee, or to one department.
    Each employee is credited independently; see ``results`` for failures.
    """
    return await service.credit_all(data.amount, department=data.department)

@router.get("/{employee_id}", response_model=BalanceResponse)
async def get_balance(employee_id: str, service: BalanceLedgerService = Depends(get_ledger_service)):
    balance = await service.get_balance(employee_id)
    return BalanceResponse(employee_id=employee_id, ticket_balance=balance)

@router.post("/{employee_id}/credit", response_model=BalanceResponse)
async def credit_employee(
    employee_id: str,
    data: BalanceAdjustment,
    service: BalanceLedgerService = Depends(get_ledger_service),
):
    balance = await service.credit_one(employee_id, data.amount)
    return BalanceResponse(employee_id=employee_id, ticket_balance=balance)

@router.post("/{employee_id}/debit", response_model=BalanceResponse)
async def debit_employee(
    employee_id: str,
    data: BalanceAdjustment,
    service: BalanceLedgerService = Depends(get_ledger_service),
):
    balance = await service.debit(employee_id, data.amount)
    return BalanceResponse(employee_id=employee_id, ticket_balance=balance)
