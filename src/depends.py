from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.repositories.report_repository import SqlAlchemyReportRepository
from src.app.services.report_cache import ReportCache

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

# One cache per process, shared by every report request
report_cache = ReportCache(ttl_seconds=ApplicationConfig.REPORT_CACHE_TTL_SECONDS)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


def get_report_cache() -> ReportCache:
    return report_cache


def get_report_repository() -> SqlAlchemyReportRepository:
    return SqlAlchemyReportRepository(AsyncSessionLocal)
