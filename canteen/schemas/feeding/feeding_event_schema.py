from pydantic import BaseModel, ConfigDict
from typing import List
from datetime import datetime

from canteen.models.shared.enums import TimeFrame

class FeedingEventResponse(BaseModel):
    id: int
    employee_id: str
    employee_name: str
    department: str
    timestamp: datetime

    model_config = ConfigDict(from_attributes=True)

class ReportRow(BaseModel):
    name: str
    count: int

class ConsumptionReport(BaseModel):
    time_frame: TimeFrame
    total_events: int
    by_employee: List[ReportRow]
    by_department: List[ReportRow]
