"""Data access for option tables.

One repository class serves every option kind; it is bound to the model
class of a kind at construction time.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy import exists, select
from sqlalchemy.orm import Session

from ..models.options import OptionRecord

T = TypeVar("T", bound=OptionRecord)


class OptionRepository(Generic[T]):
    def __init__(self, session: Session, model: type[T]) -> None:
        self._session = session
        self._model = model

    @property
    def model(self) -> type[T]:
        return self._model

    def exists_by_name(self, name: str) -> bool:
        """True if an active option already holds ``name`` (exact match)."""
        m = self._model
        stmt = select(exists().where(m.name == name, m.deleted_at.is_(None)))
        return bool(self._session.execute(stmt).scalar())

    def exists_by_name_and_id_not(self, name: str, exclude_id: Any) -> bool:
        """True if an active option other than ``exclude_id`` holds ``name``."""
        m = self._model
        stmt = select(
            exists().where(m.name == name, m.id != exclude_id, m.deleted_at.is_(None))
        )
        return bool(self._session.execute(stmt).scalar())

    def find_by_deleted_at_is_null(self) -> list[T]:
        m = self._model
        stmt = select(m).where(m.deleted_at.is_(None)).order_by(m.created_at, m.id)
        return list(self._session.execute(stmt).scalars().all())

    def find_all(self) -> list[T]:
        """Every row, soft-deleted ones included."""
        m = self._model
        return list(self._session.execute(select(m).order_by(m.created_at, m.id)).scalars().all())

    def get(self, option_id: Any) -> T | None:
        return self._session.get(self._model, option_id)

    def find_many(self, option_ids: Sequence[Any]) -> list[T]:
        if not option_ids:
            return []
        m = self._model
        stmt = select(m).where(m.id.in_(option_ids))
        return list(self._session.execute(stmt).scalars().all())

    def add(self, option: T) -> T:
        self._session.add(option)
        return option

    def add_all(self, options: Iterable[T]) -> list[T]:
        options = list(options)
        self._session.add_all(options)
        return options
