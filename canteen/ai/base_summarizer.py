from abc import ABC, abstractmethod
from typing import Any, Dict
import logging

logger = logging.getLogger(__name__)

# Fields every summarizer must return, each free text
ANALYSIS_OUTPUT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "trends": {
            "type": "string",
            "description": "Summary of the trends in employee ticket printing habits (daily patterns, weekly variations).",
        },
        "peakHours": {
            "type": "string",
            "description": "The hours during which employees print the most canteen tickets.",
        },
        "overallAnalysis": {
            "type": "string",
            "description": "Overall analysis of consumption patterns with suggestions for optimizing canteen resources and reducing waste.",
        },
    },
    "required": ["trends", "peakHours", "overallAnalysis"],
    "additionalProperties": False,
}


class SummarizerError(Exception):
    """Raised by a summarizer when it cannot produce a response."""


class BaseSummarizer(ABC):
    """Turns a serialized feeding-event batch into narrative trend text."""

    def __init__(self, provider: str):
        self.provider = provider

    @abstractmethod
    async def summarize(self, request: Dict[str, Any]) -> Dict[str, Any]:
        """
        ``request`` holds ``feeding_data`` (JSON string of the batch) and
        ``output_schema``. Returns a mapping matching that schema or raises.
        """
