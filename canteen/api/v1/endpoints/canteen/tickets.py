from fastapi import APIRouter, Depends, status

from canteen.api.dependencies import get_issuance_service
from canteen.schemas.feeding.ticket_schema import TicketIssueRequest, TicketResponse
from canteen.services.feeding.ticket_issuance_service import TicketIssuanceService

router = APIRouter()

@router.post("/issue", response_model=TicketResponse, status_code=status.HTTP_201_CREATED)
async def issue_ticket(
    data: TicketIssueRequest,
    service: TicketIssuanceService = Depends(get_issuance_service),
):
    """
    Issue one meal ticket to a biometrically identified employee.
    Called by the scanner integration after a successful match.
    """
    return await service.issue(data.employee_id)
