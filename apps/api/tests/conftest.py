import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from config import settings
from database import Base, get_db
from main import app
from routers import rate_limit
from services.credentials import create_instructor_account
from services.session_token import create_session_token


@pytest.fixture(autouse=True)
def reset_local_rate_limit_counters():
    """Keep in-memory rate-limit state isolated between tests."""
    previous = getattr(app.state, "disable_rate_limits", False)
    app.state.disable_rate_limits = True
    rate_limit._local_counters.clear()
    yield
    rate_limit._local_counters.clear()
    app.state.disable_rate_limits = previous


@pytest.fixture(autouse=True)
def isolated_upload_dir(tmp_path, monkeypatch):
    upload_dir = tmp_path / "uploads"
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(upload_dir))
    return upload_dir


@pytest_asyncio.fixture
async def session_maker(tmp_path):
    db_path = tmp_path / "lesson_report.db"
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}")
    maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield maker

    await engine.dispose()


@pytest_asyncio.fixture
async def api_client(session_maker):
    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.pop(get_db, None)


async def seed_instructor(session_maker, username: str, password: str = "pass1234"):
    """Create an instructor with a login and return (instructor_id, auth_header)."""
    async with session_maker() as db:
        user = await create_instructor_account(
            db,
            username=username,
            password=password,
            email=f"{username}@lessonreport.local",
            display_name=username.title(),
        )
    token = create_session_token(user.instructor_id, user.username)["token"]
    return user.instructor_id, {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_instructor(session_maker):
    async def _make(username: str, password: str = "pass1234"):
        return await seed_instructor(session_maker, username, password)

    return _make
