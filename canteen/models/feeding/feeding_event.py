from sqlalchemy import Column, Integer, String, DateTime, Index
from canteen.models.base import Base

class FeedingEvent(Base):
    """One completed issuance. Rows are written once and never updated."""
    __tablename__ = 'feeding_events'
    __table_args__ = (
        Index('ix_feeding_events_timestamp_id', 'timestamp', 'id'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    # not a foreign key: events outlive deleted employees
    employee_id = Column(String(50), nullable=False, index=True)
    employee_name = Column(String(150), nullable=False)
    department = Column(String(100), nullable=False, index=True)
    timestamp = Column(DateTime(timezone=True), nullable=False)
