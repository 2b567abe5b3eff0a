from __future__ import annotations

from sqlalchemy import Index, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from ..db import Base
from .catalog import OPTION_KINDS, OptionKind
from .mixins import LifecycleMixin

NAME_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 255
STRING_ID_MAX_LENGTH = 64


class OptionRecord(LifecycleMixin):
    """
    Columns shared by every option table.

    Concrete classes are generated per kind by ``_build_model``; they add the
    primary key (integer surrogate or generated string) and the partial unique
    index that keeps names unique among active rows.
    """

    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    description: Mapped[str | None] = mapped_column(
        String(DESCRIPTION_MAX_LENGTH), nullable=True
    )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id!r} name={self.name!r}>"


def _build_model(kind: OptionKind) -> type[OptionRecord]:
    if kind.is_integer_keyed:
        id_column = mapped_column(
            kind.id_column, Integer, primary_key=True, autoincrement=True
        )
    else:
        id_column = mapped_column(kind.id_column, String(STRING_ID_MAX_LENGTH), primary_key=True)

    active_clause = text("deleted_at IS NULL")
    attrs = {
        "__tablename__": kind.table,
        "__table_args__": (
            # One active row per name; soft-deleted rows release the name
            Index(
                f"uq_{kind.table}_name_active",
                "name",
                unique=True,
                postgresql_where=active_clause,
                sqlite_where=active_clause,
            ),
        ),
        "id": id_column,
        "option_kind": kind,
        "__module__": __name__,
    }
    return type(Base)(kind.model_name, (OptionRecord, Base), attrs)


# Built at import so every table is registered on Base.metadata
OPTION_MODELS: dict[str, type[OptionRecord]] = {
    kind.slug: _build_model(kind) for kind in OPTION_KINDS
}


def option_model(kind: OptionKind) -> type[OptionRecord]:
    return OPTION_MODELS[kind.slug]
