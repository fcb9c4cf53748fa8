from fastapi import APIRouter, Depends, Query
from typing import Optional
from datetime import datetime

from canteen.api.dependencies import get_feeding_event_service
from canteen.models.shared.enums import SortOrder, TimeFrame
from canteen.schemas.common.pagination import PaginatedResponse
from canteen.schemas.feeding.feeding_event_schema import ConsumptionReport, FeedingEventResponse
from canteen.services.feeding.feeding_event_service import FeedingEventService

router = APIRouter()

@router.get("/", response_model=PaginatedResponse[FeedingEventResponse])
async def get_feeding_events(
    page_index: int = Query(1, ge=1),
    page_size: int = Query(100, ge=1, le=1000),
    employee_id: Optional[str] = Query(None),
    department: Optional[str] = Query(None),
    start: Optional[datetime] = Query(None, description="Events at or after this time"),
    end: Optional[datetime] = Query(None, description="Events at or before this time"),
    order: SortOrder = Query(SortOrder.DESC, description="desc for history, asc for chronological"),
    service: FeedingEventService = Depends(get_feeding_event_service),
):
    """Feeding history"""
    events = await service.list_events(
        employee_id=employee_id,
        department=department,
        start=start,
        end=end,
        order=order,
        limit=page_size,
        offset=(page_index - 1) * page_size,
    )
    total = await service.count_events(employee_id=employee_id, department=department, start=start, end=end)
    return {
        "page_index": page_index,
        "page_size": page_size,
        "count": total,
        "data": [FeedingEventResponse.model_validate(e) for e in events],
    }

@router.get("/report", response_model=ConsumptionReport)
async def get_consumption_report(
    time_frame: TimeFrame = Query(TimeFrame.DAY),
    service: FeedingEventService = Depends(get_feeding_event_service),
):
    """Ticket counts per employee and per department"""
    return await service.consumption_report(time_frame)
