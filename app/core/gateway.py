import logging
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql import Executable

from app.core.exceptions import StorageError

logger = logging.getLogger(__name__)


@dataclass
class MutationResult:
    """Outcome of a single INSERT/UPDATE/DELETE"""

    changed_count: int


class Gateway:
    """Persistence gateway over a SQLAlchemy session.

    Statements are SQLAlchemy statement objects, so every value reaches the
    driver as a bound parameter. Each call outside of ``transaction()`` commits
    on its own; inside it, the work is committed once when the outermost block
    exits and rolled back as a whole if anything raises.
    """

    def __init__(self, db: Session):
        self.db = db
        self._depth = 0

    @staticmethod
    def new_id() -> str:
        """Generate a globally unique identifier"""
        return str(uuid.uuid4())

    @property
    def in_transaction(self) -> bool:
        return self._depth > 0

    @contextmanager
    def transaction(self) -> Iterator["Gateway"]:
        """Group several statements into one atomic unit.

        Nested blocks join the enclosing one.
        """
        self._depth += 1
        try:
            yield self
        except BaseException:
            self._depth -= 1
            if self._depth == 0:
                self.db.rollback()
            raise
        self._depth -= 1
        if self._depth == 0:
            self._commit()

    def query(self, statement: Executable) -> List[Any]:
        """Run a SELECT returning ORM entities (or single column values)"""
        try:
            return list(self.db.scalars(statement).all())
        except SQLAlchemyError as e:
            self._fail(statement, e)

    def query_rows(self, statement: Executable) -> List[Any]:
        """Run a SELECT returning full rows, e.g. entity plus aggregates"""
        try:
            return list(self.db.execute(statement).all())
        except SQLAlchemyError as e:
            self._fail(statement, e)

    def query_first(self, statement: Executable) -> Optional[Any]:
        """Run a SELECT and return the first entity or None"""
        try:
            return self.db.scalars(statement).first()
        except SQLAlchemyError as e:
            self._fail(statement, e)

    def mutate(self, statement: Executable) -> MutationResult:
        """Run one mutating statement"""
        result = self._execute(statement)
        if not self.in_transaction:
            self._commit()
        return result

    def batch(self, statements: Sequence[Executable]) -> List[MutationResult]:
        """Run mutating statements atomically: all succeed or none is kept"""
        if not statements:
            return []
        with self.transaction():
            return [self._execute(statement) for statement in statements]

    def _execute(self, statement: Executable) -> MutationResult:
        if statement.is_update or statement.is_delete:
            statement = statement.execution_options(synchronize_session=False)
        try:
            result = self.db.execute(statement)
        except SQLAlchemyError as e:
            self._fail(statement, e)
        # Loaded entities may no longer match their rows
        self.db.expire_all()
        return MutationResult(changed_count=result.rowcount)

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Commit failed: {e}")
            raise StorageError(f"Failed to commit changes: {e}") from e

    def _fail(self, statement: Executable, error: SQLAlchemyError):
        logger.error(f"❌ Statement failed: {statement} ({error})")
        self.db.rollback()
        raise StorageError(f"Storage operation failed: {error}") from error
