"""SQLAlchemy Unit of Work

Commits or rolls back the session shared by the repositories of one use case.
Rolling back also releases any row lock taken with SELECT FOR UPDATE.
"""

from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        if self.session.in_transaction():
            await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
