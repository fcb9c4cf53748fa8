from pydantic import BaseModel, Field
from datetime import datetime

class TicketIssueRequest(BaseModel):
    employee_id: str = Field(..., min_length=1)

class TicketResponse(BaseModel):
    """Printable meal ticket. Returned to the caller, never stored."""
    ticket_id: str
    employee_id: str
    employee_name: str
    department: str
    timestamp: datetime
    remaining_balance: int
