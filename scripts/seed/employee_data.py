"""
Employee Directory Seed Data (async, idempotent)
- Sample employees with opening ticket balances
Run:  python scripts/seed/employee_data.py
"""

import asyncio

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from canteen.core.database import async_session_maker
from canteen.db.init_db import create_tables
from canteen.models.hr.employee import Employee

# ----------------------------------------------------------------------
# SEED DATA
# ----------------------------------------------------------------------

EMPLOYEES_SEED = [
    {"id": "E-001", "name": "Alice Johnson",   "department": "Production",        "ticket_balance": 10},
    {"id": "E-002", "name": "Bob Williams",    "department": "Logistics",         "ticket_balance": 15},
    {"id": "E-003", "name": "Charlie Brown",   "department": "Production",        "ticket_balance": 20},
    {"id": "E-004", "name": "Diana Miller",    "department": "Quality Assurance", "ticket_balance": 5},
    {"id": "E-005", "name": "Ethan Garcia",    "department": "Human Resources",   "ticket_balance": 12},
    {"id": "E-006", "name": "Fiona Rodriguez", "department": "Maintenance",       "ticket_balance": 8},
    {"id": "E-007", "name": "George Smith",    "department": "Production",        "ticket_balance": 22},
    {"id": "E-008", "name": "Hannah Davis",    "department": "Logistics",         "ticket_balance": 3},
    {"id": "E-009", "name": "Ian Martinez",    "department": "Quality Assurance", "ticket_balance": 18},
    {"id": "E-010", "name": "Jane Wilson",     "department": "Human Resources",   "ticket_balance": 30},
]

# ----------------------------------------------------------------------


async def seed_employees(session: AsyncSession) -> int:
    """Insert missing sample employees; existing rows are left untouched."""
    result = await session.execute(select(Employee.id))
    existing = set(result.scalars().all())

    created = 0
    for data in EMPLOYEES_SEED:
        if data["id"] in existing:
            continue
        session.add(Employee(**data))
        created += 1

    await session.commit()
    return created


async def main():
    await create_tables()
    async with async_session_maker() as session:
        created = await seed_employees(session)
    print(f"✓ Seeded {created} employee(s)")


if __name__ == "__main__":
    asyncio.run(main())
