"""
Atomic execution of several pending writes.

The coordinator rents one session, binds every operation to it in order
and commits once.  Any failure, including cancellation of the calling
task, rolls the whole batch back.
"""
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from rocketfuel.dao.operation import DaoOperation
from rocketfuel.errors import DataAccessFailure, OperationAlreadyExecuted

logger = logging.getLogger(__name__)


class TransactionCoordinator:

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def execute_transaction(self, *operations: DaoOperation) -> None:
        """
        Run *operations* in one transaction, in the order given.

        Only completion is signalled; per-operation results are dropped.
        Raises ``OperationAlreadyExecuted`` before touching the database if
        any operation has already been dispatched.
        """
        for op in operations:
            if op.dispatched:
                raise OperationAlreadyExecuted(
                    f"{op.description} was dispatched before joining a transaction"
                )
        if not operations:
            return

        names = ", ".join(op.description for op in operations)
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    for op in operations:
                        await op.bind(session)
        except SQLAlchemyError as exc:
            # Raised by commit itself; failures inside bind are already wrapped.
            logger.error("Transaction [%s] failed to commit", names)
            raise DataAccessFailure("transaction", exc) from exc
        except DataAccessFailure:
            logger.error("Transaction [%s] rolled back", names)
            raise
        logger.debug("Transaction [%s] committed", names)
