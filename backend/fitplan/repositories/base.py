# fitplan/repositories/base.py
from __future__ import annotations
import logging
from contextlib import contextmanager
from typing import Generic, Iterator, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fitplan.errors import StorageError

T = TypeVar("T")  # SQLAlchemy model type

log = logging.getLogger(__name__)

class BaseRepository(Generic[T]):
    """Lightweight base for repositories using SQLAlchemy 2.0 style."""
    def __init__(self, db: Session):
        self.db = db

    def add_and_commit(self, entity: T) -> T:
        self.db.add(entity)
        self.db.commit()
        self.db.refresh(entity)
        return entity

    @contextmanager
    def storage_errors(self, what: str) -> Iterator[None]:
        """Roll back and re-raise database failures as ``StorageError``."""
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            log.error("storage failure while %s: %s", what, e)
            raise StorageError(f"failed while {what}") from e
