import pytest
from datetime import datetime, timedelta, timezone

from canteen.core.config import settings
from canteen.models.shared.enums import SortOrder, TimeFrame
from canteen.services.feeding.feeding_event_service import FeedingEventService, time_frame_start

NOW = datetime(2026, 3, 31, 14, 30, tzinfo=timezone.utc)


async def add_event(session, employee_id, name, department, when):
    event = await FeedingEventService(session).append(
        employee_id=employee_id, employee_name=name, department=department, timestamp=when,
    )
    await session.commit()
    return event


@pytest.fixture
async def history(session):
    """Six events spread over the last two months"""
    await add_event(session, "E-001", "Alice Johnson", "Production", NOW - timedelta(hours=2))
    await add_event(session, "E-002", "Bob Williams", "Logistics", NOW - timedelta(hours=1))
    await add_event(session, "E-001", "Alice Johnson", "Production", NOW - timedelta(days=3))
    await add_event(session, "E-004", "Diana Miller", "Quality Assurance", NOW - timedelta(days=20))
    await add_event(session, "E-001", "Alice Johnson", "Production", NOW - timedelta(days=45))
    await add_event(session, "E-003", "", "", NOW - timedelta(minutes=10))


@pytest.mark.asyncio
class TestFeedingEventLog:
    async def test_history_is_newest_first(self, session, history):
        events = await FeedingEventService(session).list_events()

        stamps = [e.timestamp for e in events]
        assert len(events) == 6
        assert stamps == sorted(stamps, reverse=True)

    async def test_analysis_order_is_chronological(self, session, history):
        events = await FeedingEventService(session).list_events(order=SortOrder.ASC)

        stamps = [e.timestamp for e in events]
        assert stamps == sorted(stamps)

    async def test_filters(self, session, history):
        service = FeedingEventService(session)

        assert len(await service.list_events(employee_id="E-001")) == 3
        assert len(await service.list_events(department="Logistics")) == 1
        recent = await service.list_events(start=NOW - timedelta(days=1))
        assert len(recent) == 3
        assert await service.count_events(employee_id="E-001", end=NOW - timedelta(days=1)) == 2

    async def test_limit_and_offset(self, session, history):
        service = FeedingEventService(session)

        first_page = await service.list_events(limit=4)
        second_page = await service.list_events(limit=4, offset=4)
        assert len(first_page) == 4
        assert len(second_page) == 2
        assert not {e.id for e in first_page} & {e.id for e in second_page}

    async def test_analysis_batch(self, session, history):
        batch = await FeedingEventService(session).analysis_batch(start=NOW - timedelta(days=4))

        assert [item["employee_id"] for item in batch] == ["E-001", "E-001", "E-002", "E-003"]
        assert all(set(item) == {"employee_id", "timestamp"} for item in batch)


@pytest.mark.asyncio
class TestConsumptionReport:
    async def test_week_report(self, session, history):
        report = await FeedingEventService(session).consumption_report(TimeFrame.WEEK, now=NOW)

        assert report.total_events == 4
        assert [(r.name, r.count) for r in report.by_employee] == [
            ("Alice Johnson", 2),
            ("Bob Williams", 1),
            ("Unknown Employee", 1),
        ]
        assert [(r.name, r.count) for r in report.by_department] == [
            ("Production", 2),
            ("Logistics", 1),
            ("Unknown", 1),
        ]

    async def test_all_time_report(self, session, history):
        report = await FeedingEventService(session).consumption_report(TimeFrame.ALL, now=NOW)

        assert report.total_events == 6
        assert report.by_employee[0].name == "Alice Johnson"
        assert report.by_employee[0].count == 3

    async def test_empty_report(self, session):
        report = await FeedingEventService(session).consumption_report(TimeFrame.DAY, now=NOW)

        assert report.total_events == 0
        assert report.by_employee == []
        assert report.by_department == []


class TestTimeFrameStart:
    def test_day_starts_at_local_midnight(self, monkeypatch):
        monkeypatch.setattr(settings, "TIMEZONE", "UTC")
        assert time_frame_start(TimeFrame.DAY, NOW) == datetime(2026, 3, 31, tzinfo=timezone.utc)

    def test_week(self):
        assert time_frame_start(TimeFrame.WEEK, NOW) == NOW - timedelta(days=7)

    def test_month_clamps_to_shorter_month(self):
        assert time_frame_start(TimeFrame.MONTH, NOW) == datetime(2026, 2, 28, 14, 30, tzinfo=timezone.utc)

    def test_month_across_year_boundary(self):
        start = time_frame_start(TimeFrame.MONTH, datetime(2026, 1, 15, tzinfo=timezone.utc))
        assert start == datetime(2025, 12, 15, tzinfo=timezone.utc)

    def test_all_has_no_bound(self):
        assert time_frame_start(TimeFrame.ALL, NOW) is None
