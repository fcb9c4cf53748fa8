import json
import logging
from typing import Any, List, Mapping, Optional, Sequence, Union
from pydantic import ValidationError as PydanticValidationError

from canteen.ai.base_summarizer import ANALYSIS_OUTPUT_SCHEMA, BaseSummarizer
from canteen.core.config import settings
from canteen.core.exceptions import (
    InsufficientDataError,
    InvalidAnalysisInputError,
    SummarizationFailedError,
)
from canteen.schemas.analytics.analysis_schema import AnalysisResult, ConsumptionEvent
from canteen.services.feeding.feeding_event_service import as_utc

logger = logging.getLogger(__name__)

EventInput = Union[ConsumptionEvent, Mapping[str, Any]]


class ConsumptionAnalysisService:
    """Summarizes a batch of feeding events through a summarization collaborator."""

    def __init__(self, summarizer: BaseSummarizer, max_events: Optional[int] = None):
        self.summarizer = summarizer
        self.max_events = max_events or settings.ANALYSIS_MAX_EVENTS

    def _validate(self, events: Sequence[EventInput]) -> List[ConsumptionEvent]:
        validated = []
        for index, item in enumerate(events):
            if isinstance(item, ConsumptionEvent):
                validated.append(item)
                continue
            try:
                validated.append(ConsumptionEvent.model_validate(item))
            except PydanticValidationError as e:
                fields = ", ".join(".".join(str(p) for p in err["loc"]) or "event" for err in e.errors())
                raise InvalidAnalysisInputError(f"Event #{index} is malformed ({fields})")
        return validated

    async def analyze(self, events: Sequence[EventInput]) -> AnalysisResult:
        if not events:
            raise InsufficientDataError()

        batch = sorted(self._validate(events), key=lambda e: as_utc(e.timestamp))
        truncated = len(batch) > self.max_events
        if truncated:
            # keep the most recent events
            batch = batch[-self.max_events:]
            logger.info(f"Analysis batch truncated to the latest {self.max_events} events")

        feeding_data = json.dumps([
            {"employeeId": e.employee_id, "timestamp": as_utc(e.timestamp).isoformat()}
            for e in batch
        ])
        request = {"feeding_data": feeding_data, "output_schema": ANALYSIS_OUTPUT_SCHEMA}

        try:
            response = await self.summarizer.summarize(request)
        except Exception as e:
            logger.error(f"Summarization via {self.summarizer.provider} failed: {e}")
            raise SummarizationFailedError()

        fields = {}
        for key in ANALYSIS_OUTPUT_SCHEMA["required"]:
            value = response.get(key) if isinstance(response, Mapping) else None
            if not isinstance(value, str) or not value.strip():
                logger.error(f"Summarization via {self.summarizer.provider} returned no usable '{key}'")
                raise SummarizationFailedError()
            fields[key] = value.strip()

        return AnalysisResult(
            trends=fields["trends"],
            peak_hours=fields["peakHours"],
            overall_analysis=fields["overallAnalysis"],
            event_count=len(batch),
            truncated=truncated,
        )
