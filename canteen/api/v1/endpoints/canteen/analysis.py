from fastapi import APIRouter, Depends

from canteen.api.dependencies import get_analysis_service, get_feeding_event_service
from canteen.schemas.analytics.analysis_schema import AnalysisRequest, AnalysisResult, LogAnalysisRequest
from canteen.services.analytics.consumption_analysis_service import ConsumptionAnalysisService
from canteen.services.feeding.feeding_event_service import FeedingEventService

router = APIRouter()

@router.post("/", response_model=AnalysisResult)
async def analyze_events(
    data: AnalysisRequest,
    service: ConsumptionAnalysisService = Depends(get_analysis_service),
):
    """Analyze an explicit batch of ``{employee_id, timestamp}`` events"""
    return await service.analyze(data.events)

@router.post("/from-log", response_model=AnalysisResult)
async def analyze_feeding_log(
    data: LogAnalysisRequest,
    feeding_log: FeedingEventService = Depends(get_feeding_event_service),
    service: ConsumptionAnalysisService = Depends(get_analysis_service),
):
    """Analyze the logged feeding events, optionally within a time window"""
    batch = await feeding_log.analysis_batch(start=data.start, end=data.end)
    return await service.analyze(batch)
