from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from datetime import datetime

from canteen.models.hr.employee import MAX_TICKET_BALANCE

class EmployeeBase(BaseModel):
    name: str
    department: str

    model_config = ConfigDict(from_attributes=True)

class EmployeeCreate(EmployeeBase):
    id: str = Field(..., min_length=1, max_length=50, description="Stable employee identifier, e.g. E-001")
    ticket_balance: int = Field(0, ge=0, le=MAX_TICKET_BALANCE)

    @field_validator('id')
    @classmethod
    def validate_id(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Employee ID cannot be blank')
        return v

    @field_validator('name', 'department')
    @classmethod
    def validate_text(cls, v):
        if not v or len(v.strip()) < 2:
            raise ValueError('Must be at least 2 characters')
        return v.strip()

class EmployeeUpdate(BaseModel):
    """Profile fields only; the balance moves through the ledger endpoints."""
    name: Optional[str] = None
    department: Optional[str] = None

    @field_validator('name', 'department')
    @classmethod
    def validate_text(cls, v):
        if v is not None and len(v.strip()) < 2:
            raise ValueError('Must be at least 2 characters')
        return v.strip() if v else v

class EmployeeResponse(EmployeeBase):
    id: str
    ticket_balance: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
