from pydantic import BaseModel, field_validator
from typing import Any, Dict, List, Optional
from datetime import datetime

class ConsumptionEvent(BaseModel):
    employee_id: str
    timestamp: datetime

    @field_validator('employee_id')
    @classmethod
    def validate_employee_id(cls, v):
        if not v or not v.strip():
            raise ValueError('employee_id cannot be blank')
        return v.strip()

class AnalysisRequest(BaseModel):
    events: List[Dict[str, Any]]

class LogAnalysisRequest(BaseModel):
    start: Optional[datetime] = None
    end: Optional[datetime] = None

class AnalysisResult(BaseModel):
    trends: str
    peak_hours: str
    overall_analysis: str
    event_count: int
    truncated: bool = False
