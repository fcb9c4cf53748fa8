from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional

from canteen.api.dependencies import get_employee_service
from canteen.schemas.common.pagination import PaginatedResponse
from canteen.schemas.hr.employee_schema import EmployeeCreate, EmployeeResponse, EmployeeUpdate
from canteen.services.hr.employee_service import EmployeeService

router = APIRouter()

@router.post("/", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
async def create_employee(
    data: EmployeeCreate,
    service: EmployeeService = Depends(get_employee_service),
):
    """Register a new employee with an opening ticket balance"""
    return await service.create_employee(data)

@router.get("/", response_model=PaginatedResponse[EmployeeResponse])
async def get_employees(
    page_index: int = Query(1, ge=1),
    page_size: int = Query(100, ge=1, le=1000),
    department: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Search by employee name or ID"),
    service: EmployeeService = Depends(get_employee_service),
):
    """Get employees ordered by name"""
    return await service.get_employees(
        page_index=page_index,
        page_size=page_size,
        department=department,
        search=search,
    )

@router.get("/departments", response_model=List[str])
async def get_departments(service: EmployeeService = Depends(get_employee_service)):
    return await service.get_departments()

@router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(employee_id: str, service: EmployeeService = Depends(get_employee_service)):
    return await service.get_employee(employee_id)

@router.put("/{employee_id}", response_model=EmployeeResponse)
async def update_employee(
    employee_id: str,
    data: EmployeeUpdate,
    service: EmployeeService = Depends(get_employee_service),
):
    """Update name or department; balances change only through the ledger"""
    return await service.update_employee(employee_id, data)

@router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_employee(employee_id: str, service: EmployeeService = Depends(get_employee_service)):
    await service.delete_employee(employee_id)
