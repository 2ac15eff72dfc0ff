import pytest_asyncio
from decimal import Decimal
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.adapter.repositories.report_repository import SqlAlchemyReportRepository
from src.app.services.report_cache import ReportCache
from src.depends import get_report_cache, get_report_repository, get_session
from src.domain import Platform


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """Create a fresh SQLite database per test"""
    test_db_url = f"sqlite+aiosqlite:///{tmp_path / 'ledger_test.db'}"

    engine = create_async_engine(test_db_url, echo=False, future=True)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Create a new database session for each test"""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def report_cache():
    return ReportCache(ttl_seconds=300)


@pytest_asyncio.fixture
async def report_repo(session_factory):
    return SqlAlchemyReportRepository(session_factory)


@pytest_asyncio.fixture
async def seed_platform(db_session):
    """Factory inserting a committed platform"""

    async def _seed_platform(name: str, balance: str = "0.00", threshold: str = "100.00", **kwargs) -> Platform:
        platform = Platform(
            name=name,
            credit_balance=Decimal(balance),
            low_balance_threshold=Decimal(threshold),
            **kwargs,
        )
        db_session.add(platform)
        await db_session.commit()
        return platform

    return _seed_platform


@pytest_asyncio.fixture
async def reload_platform(db_session):
    """Re-read a platform from the database, overwriting identity map state"""

    async def _reload_platform(platform_id: str) -> Platform:
        stmt = select(Platform).where(Platform.id == platform_id).execution_options(populate_existing=True)
        result = await db_session.execute(stmt)
        return result.scalar_one()

    return _reload_platform


@pytest_asyncio.fixture
async def client(db_session, report_repo, report_cache):
    """Create test client with database session override"""
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_report_repository] = lambda: report_repo
    app.dependency_overrides[get_report_cache] = lambda: report_cache

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
