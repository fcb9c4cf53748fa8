import pytest
from typing import AsyncGenerator, Any, Dict
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from canteen.ai.base_summarizer import BaseSummarizer
from canteen.api.dependencies import get_summarizer
from canteen.core.config import settings
from canteen.core.database import get_async_session
from canteen.main import app
from canteen.models import Employee
from canteen.models.base import Base

SAMPLE_EMPLOYEES = [
    {"id": "E-001", "name": "Alice Johnson", "department": "Production", "ticket_balance": 3},
    {"id": "E-002", "name": "Bob Williams", "department": "Logistics", "ticket_balance": 2},
    {"id": "E-003", "name": "Charlie Brown", "department": "Production", "ticket_balance": 0},
    {"id": "E-004", "name": "Diana Miller", "department": "Quality Assurance", "ticket_balance": 5},
]


class FakeSummarizer(BaseSummarizer):
    """Records every request and answers with canned analysis text."""

    def __init__(self, response: Dict[str, Any] = None, error: Exception = None):
        super().__init__(provider="fake")
        self.requests = []
        self.response = response or {
            "trends": "Most tickets are printed on weekdays.",
            "peakHours": "12:00-13:00",
            "overallAnalysis": "Prepare more meals around noon.",
        }
        self.error = error

    async def summarize(self, request: Dict[str, Any]) -> Dict[str, Any]:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture(autouse=True)
def fast_retries(monkeypatch):
    monkeypatch.setattr(settings, "LEDGER_RETRY_BACKOFF_SECONDS", 0.0)


@pytest.fixture
async def engine(tmp_path):
    """File-backed SQLite so concurrent sessions use separate connections."""
    test_engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'canteen-test.db'}",
        connect_args={"timeout": 30},
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_maker(engine) -> async_sessionmaker:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def seeded(session_maker):
    async with session_maker() as session:
        session.add_all([Employee(**data) for data in SAMPLE_EMPLOYEES])
        await session.commit()


@pytest.fixture
async def session(session_maker, seeded) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        yield session


@pytest.fixture
def summarizer() -> FakeSummarizer:
    return FakeSummarizer()


@pytest.fixture
async def client(session_maker, seeded, summarizer) -> AsyncGenerator[AsyncClient, None]:
    """API client bound to the test database and the fake summarizer"""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_get_db
    app.dependency_overrides[get_summarizer] = lambda: summarizer
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def fetch_balance(session_maker, employee_id: str) -> int:
    async with session_maker() as session:
        employee = await session.get(Employee, employee_id)
        return employee.ticket_balance
