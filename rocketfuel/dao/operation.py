"""
Pending data-layer operations.

A ``DaoOperation`` describes a unit of database work without running it.
Nothing touches the database until the operation is consumed, either

- standalone (``await op``, ``async for row in op``, ``op.first()``,
  ``op.to_list()``), which rents a session from the pool and runs the
  work inside its own transaction, or
- pinned to a caller-owned session via ``bind``, which is how the
  ``TransactionCoordinator`` batches several writes into one transaction.

An operation may be dispatched exactly once.  Driver errors are wrapped
in ``DataAccessFailure`` so callers never depend on SQLAlchemy exception
types.
"""
from typing import AsyncIterator, Awaitable, Callable, Generic, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from rocketfuel.errors import DataAccessFailure, OperationAlreadyExecuted

T = TypeVar("T")

OperationBody = Callable[[AsyncSession], Awaitable[T]]


class DaoOperation(Generic[T]):

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        body: OperationBody,
        description: str,
    ) -> None:
        self._session_factory = session_factory
        self._body = body
        self.description = description
        self._dispatched = False

    def __repr__(self) -> str:
        state = "dispatched" if self._dispatched else "pending"
        return f"<DaoOperation {self.description} ({state})>"

    @property
    def dispatched(self) -> bool:
        return self._dispatched

    def _claim(self) -> None:
        if self._dispatched:
            raise OperationAlreadyExecuted(
                f"{self.description} has already been dispatched"
            )
        self._dispatched = True

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    async def execute(self) -> T:
        """Run on a freshly rented session inside its own transaction."""
        self._claim()
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    return await self._body(session)
        except SQLAlchemyError as exc:
            raise DataAccessFailure(self.description, exc) from exc

    async def bind(self, session: AsyncSession) -> T:
        """
        Run on *session* without opening or closing a transaction.

        The owner of *session* decides whether the work is committed.
        """
        self._claim()
        try:
            return await self._body(session)
        except SQLAlchemyError as exc:
            raise DataAccessFailure(self.description, exc) from exc

    def __await__(self):
        return self.execute().__await__()

    # ------------------------------------------------------------------
    # Consumption helpers for row-producing operations
    # ------------------------------------------------------------------

    def __aiter__(self) -> AsyncIterator:
        return self._stream()

    async def _stream(self):
        for row in await self.execute():
            yield row

    async def first(self):
        """Return the first row, or None when the operation produced none."""
        rows = await self.execute()
        return rows[0] if rows else None

    async def to_list(self) -> list:
        return [row async for row in self]
