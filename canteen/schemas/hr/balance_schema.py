from pydantic import BaseModel
from typing import List, Optional

class BalanceAdjustment(BaseModel):
    # validated by the ledger so a bad amount surfaces as invalid_amount
    amount: int

class BulkCreditRequest(BaseModel):
    amount: int
    department: Optional[str] = None

class BalanceResponse(BaseModel):
    employee_id: str
    ticket_balance: int

class CreditResult(BaseModel):
    employee_id: str
    success: bool
    new_balance: Optional[int] = None
    error: Optional[str] = None

class BulkCreditResponse(BaseModel):
    amount: int
    department: Optional[str] = None
    succeeded: int
    failed: int
    results: List[CreditResult]
