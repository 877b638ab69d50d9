"""SQLAlchemy unit of work."""

import logfire
from sqlalchemy.ext.asyncio import AsyncSession

from engage.domain.repository import UnitOfWork


class SQLAlchemyUnitOfWork(UnitOfWork):
    """Commits the request's session."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def commit(self) -> None:
        """Commit the session's transaction; the next statement begins a new one."""
        with logfire.span("unit_of_work.commit"):
            await self.session.commit()
