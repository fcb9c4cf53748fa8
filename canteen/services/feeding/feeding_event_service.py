import logging
from typing import Any, Dict, List, Optional
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from canteen.core.config import settings
from canteen.models.feeding.feeding_event import FeedingEvent
from canteen.models.shared.enums import SortOrder, TimeFrame
from canteen.schemas.feeding.feeding_event_schema import ConsumptionReport, ReportRow

logger = logging.getLogger(__name__)


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _sub_month(value: datetime) -> datetime:
    year, month = (value.year, value.month - 1) if value.month > 1 else (value.year - 1, 12)
    day = value.day
    while True:
        try:
            return value.replace(year=year, month=month, day=day)
        except ValueError:
            day -= 1


def time_frame_start(time_frame: TimeFrame, now: Optional[datetime] = None) -> Optional[datetime]:
    """First instant covered by ``time_frame``; ``None`` means no lower bound."""
    now = as_utc(now or datetime.now(timezone.utc))
    if time_frame == TimeFrame.DAY:
        local_now = now.astimezone(ZoneInfo(settings.TIMEZONE))
        start_of_day = local_now.replace(hour=0, minute=0, second=0, microsecond=0)
        return start_of_day.astimezone(timezone.utc)
    if time_frame == TimeFrame.WEEK:
        return now - timedelta(weeks=1)
    if time_frame == TimeFrame.MONTH:
        return _sub_month(now)
    return None


class FeedingEventService:
    """Append-only log of completed issuances."""

    def __init__(self, session: AsyncSession):
        self.session = session

    # ---------- Append ----------
    async def append(
        self,
        employee_id: str,
        employee_name: str,
        department: str,
        timestamp: datetime,
    ) -> FeedingEvent:
        """
        Add one event to the caller's open transaction and flush it so the id
        is assigned. Committing is the caller's job.
        """
        event = FeedingEvent(
            employee_id=employee_id,
            employee_name=employee_name,
            department=department,
            timestamp=as_utc(timestamp),
        )
        self.session.add(event)
        await self.session.flush()
        return event

    # ---------- Reads ----------
    def _conditions(
        self,
        employee_id: Optional[str] = None,
        department: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list:
        conditions = []
        if employee_id:
            conditions.append(FeedingEvent.employee_id == employee_id)
        if department:
            conditions.append(FeedingEvent.department == department)
        if start:
            conditions.append(FeedingEvent.timestamp >= as_utc(start))
        if end:
            conditions.append(FeedingEvent.timestamp <= as_utc(end))
        return conditions

    async def list_events(
        self,
        employee_id: Optional[str] = None,
        department: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        order: SortOrder = SortOrder.DESC,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[FeedingEvent]:
        """
        Events matching the filters. ``DESC`` (newest first) is the history
        view, ``ASC`` is the chronological order used for analysis.
        """
        if order == SortOrder.ASC:
            ordering = (FeedingEvent.timestamp.asc(), FeedingEvent.id.asc())
        else:
            ordering = (FeedingEvent.timestamp.desc(), FeedingEvent.id.desc())

        query = (
            select(FeedingEvent)
            .where(*self._conditions(employee_id, department, start, end))
            .order_by(*ordering)
            .offset(offset)
        )
        if limit is not None:
            query = query.limit(limit)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def count_events(
        self,
        employee_id: Optional[str] = None,
        department: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> int:
        total = await self.session.scalar(
            select(func.count(FeedingEvent.id)).where(*self._conditions(employee_id, department, start, end))
        )
        return int(total or 0)

    async def analysis_batch(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[Dict[str, Any]]:
        """Chronological ``{employee_id, timestamp}`` pairs ready for analysis."""
        events = await self.list_events(start=start, end=end, order=SortOrder.ASC)
        return [
            {"employee_id": e.employee_id, "timestamp": as_utc(e.timestamp).isoformat()}
            for e in events
        ]

    async def consumption_report(
        self,
        time_frame: TimeFrame = TimeFrame.DAY,
        now: Optional[datetime] = None,
    ) -> ConsumptionReport:
        start = time_frame_start(time_frame, now)
        conditions = self._conditions(start=start)

        name_col = func.coalesce(func.nullif(FeedingEvent.employee_name, ""), "Unknown Employee")
        dept_col = func.coalesce(func.nullif(FeedingEvent.department, ""), "Unknown")

        by_employee = await self._grouped_counts(name_col, conditions)
        by_department = await self._grouped_counts(dept_col, conditions)

        return ConsumptionReport(
            time_frame=time_frame,
            total_events=sum(row.count for row in by_employee),
            by_employee=by_employee,
            by_department=by_department,
        )

    async def _grouped_counts(self, column, conditions: list) -> List[ReportRow]:
        label = column.label("group_name")
        count = func.count(FeedingEvent.id).label("event_count")
        result = await self.session.execute(
            select(label, count)
            .where(*conditions)
            .group_by(label)
            .order_by(count.desc(), label.asc())
        )
        return [ReportRow(name=name, count=total) for name, total in result.all()]
