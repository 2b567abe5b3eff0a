"""Model mixins for common patterns."""

from dataclasses import dataclass
from datetime import UTC, datetime

from sqlalchemy import DateTime
from sqlalchemy.orm import Mapped, mapped_column


@dataclass(frozen=True)
class Lifecycle:
    """Snapshot of a record's bookkeeping timestamps."""

    created_at: datetime | None
    updated_at: datetime | None
    deleted_at: datetime | None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


class SoftDeleteMixin:
    """
    Mixin for soft-delete functionality.

    Adds a deleted_at timestamp column. Records with deleted_at != NULL are
    considered "soft deleted" and are filtered out of normal queries. Deletion
    is one-way: once set, deleted_at is never cleared.

    Usage:
        class MyModel(SoftDeleteMixin, Base):
            ...

        record.soft_delete()

        active_records = session.query(MyModel).filter(MyModel.deleted_at.is_(None)).all()
    """

    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None, index=True
    )

    @property
    def is_deleted(self) -> bool:
        """Check if this record is soft-deleted."""
        return self.deleted_at is not None

    def soft_delete(self, at: datetime | None = None) -> None:
        """Mark this record as deleted; a second call keeps the first timestamp."""
        if not self.is_deleted:
            self.deleted_at = at or datetime.now(UTC)


class TimestampMixin:
    """
    Mixin for automatic timestamp management.

    created_at is written once on insert; updated_at is refreshed by every
    UPDATE the ORM emits for the row.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        index=True,
    )

    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )


class LifecycleMixin(TimestampMixin, SoftDeleteMixin):
    """Timestamps plus soft delete, readable as a single Lifecycle value."""

    @property
    def lifecycle(self) -> Lifecycle:
        return Lifecycle(
            created_at=self.created_at,
            updated_at=self.updated_at,
            deleted_at=self.deleted_at,
        )
