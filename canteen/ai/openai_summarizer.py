import json
import logging
from typing import Any, Dict, Optional
import httpx

from canteen.ai.base_summarizer import BaseSummarizer, SummarizerError
from canteen.core.config import settings

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You analyse employee canteen consumption data to find trends and give "
    "insights for resource optimization and waste reduction. The data only "
    "records when meal tickets were printed, so never mention food items. "
    "Keep the answer clear, concise and actionable for canteen management."
)

USER_PROMPT = """Analyse the following employee feeding data. Each entry is one printed ticket with the employee id and an ISO timestamp:
{feeding_data}

Identify:
- key trends in ticket printing habits (daily patterns, weekly variations);
- peak hours for ticket printing;
- an overall analysis of consumption patterns with actionable suggestions for optimizing canteen resources and minimizing waste."""


class OpenAISummarizer(BaseSummarizer):
    """Chat-completions client with a JSON-schema constrained answer."""

    def __init__(
        self,
        api_url: Optional[str] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(provider="openai")
        self.api_url = api_url or settings.AI_API_URL
        self.api_key = api_key or settings.OPENAI_API_KEY
        self.model = model or settings.AI_MODEL
        self.transport = transport

    def _payload(self, request: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "model": self.model,
            "temperature": settings.AI_TEMPERATURE,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": USER_PROMPT.format(feeding_data=request["feeding_data"])},
            ],
            "response_format": {
                "type": "json_schema",
                "json_schema": {
                    "name": "consumption_analysis",
                    "strict": True,
                    "schema": request["output_schema"],
                },
            },
        }

    async def summarize(self, request: Dict[str, Any]) -> Dict[str, Any]:
        if not self.api_key:
            raise SummarizerError("AI API key is not configured")

        headers = {"Authorization": f"Bearer {self.api_key}"}
        timeout = httpx.Timeout(settings.AI_TIMEOUT_SECONDS, connect=10.0)
        async with httpx.AsyncClient(timeout=timeout, transport=self.transport) as client:
            try:
                r = await client.post(self.api_url, json=self._payload(request), headers=headers)
            except httpx.HTTPError as e:
                raise SummarizerError(f"request failed: {e}") from e

        if not r.is_success:
            raise SummarizerError(f"provider returned {r.status_code}: {r.text[:500]}")

        try:
            content = r.json()["choices"][0]["message"]["content"]
            result = json.loads(content)
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise SummarizerError(f"unreadable provider response: {e}") from e

        if not isinstance(result, dict):
            raise SummarizerError("provider response is not an object")

        logger.info(f"🤖 Consumption analysis generated by {self.model}")
        return result
