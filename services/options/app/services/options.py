"""
Option service: create, read, rename and soft-delete reference options.

The repository existence checks give friendly errors for the common case, but
the partial unique index on ``name`` is what actually enforces uniqueness; a
conflicting flush is rolled back and reported as OptionAlreadyExistsError.
Every write either commits completely or leaves the session rolled back.
"""

from __future__ import annotations

import random
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.errors import (
    InvalidOptionRequestError,
    OptionAlreadyExistsError,
    OptionError,
    OptionNotFoundError,
)
from ..core.ids import Clock, generate_option_id, utc_now
from ..core.logging import get_logger
from ..models.catalog import OptionKind
from ..models.options import OptionRecord, option_model
from ..repositories.options import OptionRepository
from ..schemas.options import OptionBulkUpdateItem, OptionCreate, OptionUpdate

logger = get_logger(__name__)

DEFAULT_MAX_BATCH_SIZE = 100

# Integer keys are signed 64-bit; anything outside cannot match a row
MAX_INTEGER_ID = 2**63 - 1


class OptionService:
    def __init__(
        self,
        session: Session,
        kind: OptionKind,
        *,
        clock: Clock | None = None,
        rng: random.Random | None = None,
        max_batch_size: int = DEFAULT_MAX_BATCH_SIZE,
    ) -> None:
        self._session = session
        self._kind = kind
        self._repo: OptionRepository[OptionRecord] = OptionRepository(
            session, option_model(kind)
        )
        self._clock = clock or utc_now
        self._rng = rng
        self._max_batch_size = max_batch_size

    @property
    def kind(self) -> OptionKind:
        return self._kind

    @property
    def repository(self) -> OptionRepository[OptionRecord]:
        return self._repo

    # Create

    def create(self, data: OptionCreate) -> OptionRecord:
        with self._unit_of_work([data.name]):
            self._ensure_name_free(data.name)
            record = self._repo.add(self._new_record(data))
            self._session.commit()
        logger.info("option.created", kind=self._kind.slug, option_id=record.id)
        return record

    def create_many(self, items: Sequence[OptionCreate]) -> list[OptionRecord]:
        self._check_batch(items)
        names = [item.name for item in items]
        repeated = sorted({n for n in names if names.count(n) > 1})
        if repeated:
            raise OptionAlreadyExistsError(
                f"{self._kind.label} option names repeated in request: {', '.join(repeated)}"
            )
        with self._unit_of_work(names):
            for item in items:
                self._ensure_name_free(item.name)
            records = self._repo.add_all(self._new_record(item) for item in items)
            self._session.commit()
        logger.info("option.created_many", kind=self._kind.slug, count=len(records))
        return records

    # Read

    def read_one(self, option_id: Any) -> OptionRecord:
        return self._get_active(option_id)

    def read_many(self, option_ids: Sequence[Any]) -> list[OptionRecord]:
        """Active options among ``option_ids``, in request order; unknown ids are skipped."""
        self._check_batch(option_ids)
        keys: list[Any] = []
        seen: set[Any] = set()
        for option_id in option_ids:
            key = self._parse_id(option_id)
            if key is not None and key not in seen:
                seen.add(key)
                keys.append(key)
        found = {record.id: record for record in self._repo.find_many(keys)}
        return [found[key] for key in keys if key in found and not found[key].is_deleted]

    def read_all(self) -> list[OptionRecord]:
        return self._repo.find_by_deleted_at_is_null()

    def read_all_including_deleted(self) -> list[OptionRecord]:
        return self._repo.find_all()

    # Update

    def update_one(self, option_id: Any, data: OptionUpdate) -> OptionRecord:
        with self._unit_of_work([data.name] if data.name else []):
            record = self._get_active(option_id)
            self._apply_update(record, data)
            self._session.commit()
        logger.info("option.updated", kind=self._kind.slug, option_id=record.id)
        return record

    def update_many(self, items: Sequence[OptionBulkUpdateItem]) -> list[OptionRecord]:
        self._check_batch(items)
        with self._unit_of_work([item.name for item in items if item.name]):
            records = []
            for item in items:
                record = self._get_active(item.id)
                self._apply_update(record, item)
                records.append(record)
            self._session.commit()
        logger.info("option.updated_many", kind=self._kind.slug, count=len(records))
        return records

    # Delete

    def soft_delete(self, option_id: Any) -> OptionRecord:
        with self._unit_of_work([]):
            record = self._get_active(option_id)
            self._mark_deleted(record)
            self._session.commit()
        logger.info("option.soft_deleted", kind=self._kind.slug, option_id=record.id)
        return record

    def soft_delete_many(self, option_ids: Sequence[Any]) -> list[OptionRecord]:
        self._check_batch(option_ids)
        with self._unit_of_work([]):
            records = [self._get_active(option_id) for option_id in option_ids]
            for record in records:
                self._mark_deleted(record)
            self._session.commit()
        logger.info("option.soft_deleted_many", kind=self._kind.slug, count=len(records))
        return records

    # Helpers

    def _new_record(self, data: OptionCreate) -> OptionRecord:
        now = self._clock()
        record = self._repo.model(
            name=data.name,
            description=data.description,
            created_at=now,
            updated_at=now,
        )
        if not self._kind.is_integer_keyed:
            # Id timestamp matches created_at
            record.id = generate_option_id(self._kind.id_prefix, clock=lambda: now, rng=self._rng)
        return record

    def _apply_update(self, record: OptionRecord, data: OptionUpdate) -> None:
        if data.name is not None:
            # Renaming to the option's own current name is allowed
            if self._repo.exists_by_name_and_id_not(data.name, record.id):
                raise OptionAlreadyExistsError(
                    f"{self._kind.label} option already exists with name: {data.name}"
                )
            record.name = data.name
        if data.description is not None:
            record.description = data.description
        record.updated_at = self._clock()

    def _mark_deleted(self, record: OptionRecord) -> None:
        now = self._clock()
        record.soft_delete(at=now)
        record.updated_at = now

    def _ensure_name_free(self, name: str) -> None:
        if self._repo.exists_by_name(name):
            raise OptionAlreadyExistsError(f"{self._kind.label} option already exists: {name}")

    def _get_active(self, option_id: Any) -> OptionRecord:
        key = self._parse_id(option_id)
        record = self._repo.get(key) if key is not None else None
        if record is None or record.lifecycle.is_deleted:
            raise OptionNotFoundError(
                f"{self._kind.label} option not found with ID: {option_id}"
            )
        return record

    def _parse_id(self, option_id: Any) -> Any:
        """Coerce a raw id to the kind's key type; None if it cannot match any row."""
        if option_id is None or isinstance(option_id, bool):
            return None
        if not self._kind.is_integer_keyed:
            return str(option_id)
        if isinstance(option_id, int):
            key = option_id
        else:
            text = str(option_id).strip()
            if not (text.isascii() and text.isdigit()):
                return None
            key = int(text)
        return key if 0 < key <= MAX_INTEGER_ID else None

    def _check_batch(self, items: Sequence[Any]) -> None:
        if not items:
            raise InvalidOptionRequestError(
                f"{self._kind.label} option list cannot be empty"
            )
        if len(items) > self._max_batch_size:
            raise InvalidOptionRequestError(
                f"At most {self._max_batch_size} {self._kind.label} options per request"
            )

    @contextmanager
    def _unit_of_work(self, names: Sequence[str]) -> Iterator[None]:
        try:
            yield
        except IntegrityError as exc:
            self._session.rollback()
            logger.warning(
                "option.conflict",
                kind=self._kind.slug,
                names=list(names),
                error=str(exc.orig),
            )
            target = ", ".join(names) if names else "an existing option"
            raise OptionAlreadyExistsError(
                f"{self._kind.label} option already exists: {target}"
            ) from exc
        except OptionError:
            self._session.rollback()
            raise
