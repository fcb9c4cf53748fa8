from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from canteen.ai.base_summarizer import BaseSummarizer
from canteen.ai.openai_summarizer import OpenAISummarizer
from canteen.core.database import get_async_session
from canteen.services.analytics.consumption_analysis_service import ConsumptionAnalysisService
from canteen.services.feeding.feeding_event_service import FeedingEventService
from canteen.services.feeding.ticket_issuance_service import TicketIssuanceService
from canteen.services.hr.balance_ledger_service import BalanceLedgerService
from canteen.services.hr.employee_service import EmployeeService


def get_employee_service(session: AsyncSession = Depends(get_async_session)) -> EmployeeService:
    return EmployeeService(session)

def get_ledger_service(session: AsyncSession = Depends(get_async_session)) -> BalanceLedgerService:
    return BalanceLedgerService(session)

def get_feeding_event_service(session: AsyncSession = Depends(get_async_session)) -> FeedingEventService:
    return FeedingEventService(session)

def get_issuance_service(session: AsyncSession = Depends(get_async_session)) -> TicketIssuanceService:
    return TicketIssuanceService(session)

def get_summarizer() -> BaseSummarizer:
    return OpenAISummarizer()

def get_analysis_service(summarizer: BaseSummarizer = Depends(get_summarizer)) -> ConsumptionAnalysisService:
    return ConsumptionAnalysisService(summarizer)
