import logging
from typing import Any, Dict, List, Optional
from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from canteen.core.exceptions import EmployeeAlreadyExistsError, EmployeeNotFoundError
from canteen.models.hr.employee import Employee
from canteen.schemas.hr.employee_schema import EmployeeCreate, EmployeeResponse, EmployeeUpdate

logger = logging.getLogger(__name__)


class EmployeeService:
    def __init__(self, session: AsyncSession):
        self.session = session

    # ---------- Create / Update / Delete ----------
    async def create_employee(self, data: EmployeeCreate) -> Employee:
        existing = await self.session.get(Employee, data.id)
        if existing is not None:
            raise EmployeeAlreadyExistsError(data.id)

        employee = Employee(**data.model_dump())
        self.session.add(employee)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise EmployeeAlreadyExistsError(data.id)
        await self.session.refresh(employee)

        logger.info(f"Employee created: {employee.id} - {employee.name} ({employee.department}) with {employee.ticket_balance} ticket(s)")
        return employee

    async def update_employee(self, employee_id: str, data: EmployeeUpdate) -> Employee:
        employee = await self.get_employee(employee_id)

        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        for field, value in changes.items():
            setattr(employee, field, value)

        await self.session.commit()
        await self.session.refresh(employee)

        logger.info(f"Employee updated: {employee.id} fields={sorted(changes)}")
        return employee

    async def delete_employee(self, employee_id: str) -> None:
        """Remove an employee. Their feeding events are kept as history."""
        result = await self.session.execute(
            delete(Employee).where(Employee.id == employee_id).returning(Employee.id)
        )
        if result.scalar_one_or_none() is None:
            await self.session.rollback()
            raise EmployeeNotFoundError(employee_id)
        await self.session.commit()
        logger.info(f"Employee deleted: {employee_id}")

    # ---------- Reads ----------
    async def get_employee(self, employee_id: str) -> Employee:
        employee = await self.session.get(Employee, employee_id, populate_existing=True)
        if employee is None:
            raise EmployeeNotFoundError(employee_id)
        return employee

    async def get_employees(
        self,
        page_index: int = 1,
        page_size: int = 100,
        department: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Dict[str, Any]:
        conditions = []
        if department:
            conditions.append(Employee.department == department)
        if search:
            term = f"%{search.strip()}%"
            conditions.append(or_(Employee.name.ilike(term), Employee.id.ilike(term)))

        total = await self.session.scalar(
            select(func.count()).select_from(Employee).where(*conditions)
        ) or 0

        skip = (page_index - 1) * page_size
        result = await self.session.execute(
            select(Employee)
            .where(*conditions)
            .order_by(Employee.name.asc(), Employee.id.asc())
            .offset(skip)
            .limit(page_size)
        )
        employees = result.scalars().all()

        return {
            "page_index": page_index,
            "page_size": page_size,
            "count": total,
            "data": [EmployeeResponse.model_validate(e) for e in employees],
        }

    async def get_departments(self) -> List[str]:
        result = await self.session.execute(
            select(Employee.department).distinct().order_by(Employee.department)
        )
        return list(result.scalars().all())
