from sqlalchemy import Column, Integer, String, CheckConstraint
from canteen.db.base import BaseModel

# upper bound of the INTEGER balance column
MAX_TICKET_BALANCE = 2**31 - 1

class Employee(BaseModel):
    __tablename__ = 'employees'
    __table_args__ = (
        CheckConstraint('ticket_balance >= 0', name='ck_employees_ticket_balance_non_negative'),
    )

    id = Column(String(50), primary_key=True)
    name = Column(String(150), nullable=False, index=True)
    department = Column(String(100), nullable=False, index=True)
    ticket_balance = Column(Integer, nullable=False, default=0, server_default='0')

    def __repr__(self) -> str:
        return f"<Employee {self.id} balance={self.ticket_balance}>"
