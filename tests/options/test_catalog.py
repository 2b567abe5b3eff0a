"""Tests for the option kind catalogue and generated models."""

import pytest
from sqlalchemy import Integer, String, inspect

from services.options.app.core.errors import UnknownOptionKindError
from services.options.app.db import Base
from services.options.app.models.catalog import OPTION_KINDS, OptionKind, get_option_kind
from services.options.app.models.options import OPTION_MODELS, OptionRecord, option_model


class TestOptionKind:
    """Tests for OptionKind validation and derived properties."""

    def test_string_kind(self):
        kind = get_option_kind("scheme_option")
        assert kind.id_prefix == "SCHEME_OPT"
        assert kind.table == "scheme_option_model"
        assert kind.is_integer_keyed is False
        assert kind.model_name == "SchemeOption"

    def test_integer_kind_uses_slug_id_column(self):
        kind = get_option_kind("execution_period_option")
        assert kind.is_integer_keyed is True
        assert kind.id_column == "execution_period_option_id"

    def test_invalid_slug_rejected(self):
        with pytest.raises(ValueError):
            OptionKind(slug="Bad-Slug", label="Bad", table="bad")

    def test_invalid_prefix_rejected(self):
        with pytest.raises(ValueError):
            OptionKind(slug="ok_option", label="Ok", table="ok", id_prefix="lower")

    def test_unknown_kind(self):
        with pytest.raises(UnknownOptionKindError) as exc_info:
            get_option_kind("no_such_option")
        assert exc_info.value.status_code == 404
        assert "no_such_option" in exc_info.value.message


class TestCatalogue:
    """Invariants across the whole catalogue."""

    def test_slugs_unique(self):
        slugs = [k.slug for k in OPTION_KINDS]
        assert len(slugs) == len(set(slugs))

    def test_tables_unique(self):
        tables = [k.table for k in OPTION_KINDS]
        assert len(tables) == len(set(tables))

    def test_prefixes_unique(self):
        prefixes = [k.id_prefix for k in OPTION_KINDS if k.id_prefix]
        assert len(prefixes) == len(set(prefixes))

    def test_every_kind_registered_on_metadata(self):
        for kind in OPTION_KINDS:
            assert kind.table in Base.metadata.tables


class TestOptionModels:
    """Tests for the per-kind model factory."""

    def test_one_model_per_kind(self):
        assert set(OPTION_MODELS) == {k.slug for k in OPTION_KINDS}

    def test_model_shares_record_base(self):
        model = option_model(get_option_kind("gender_option"))
        assert issubclass(model, OptionRecord)
        assert model.option_kind.slug == "gender_option"
        assert model.__tablename__ == "gender_option"

    def test_string_primary_key(self):
        table = option_model(get_option_kind("gender_option")).__table__
        assert isinstance(table.c.id.type, String)
        assert table.c.id.primary_key

    def test_integer_primary_key_column_name(self):
        model = option_model(get_option_kind("plan_status_option"))
        column = model.__table__.c.plan_status_option_id
        assert isinstance(column.type, Integer)
        assert column.primary_key
        # Attribute is still ``id`` so generic code does not care
        assert inspect(model).get_property("id").columns[0] is column

    def test_partial_unique_name_index(self):
        table = option_model(get_option_kind("currency_option")).__table__
        index = next(ix for ix in table.indexes if ix.name == "uq_currency_option_name_active")
        assert index.unique
        assert [c.name for c in index.columns] == ["name"]
        assert "deleted_at IS NULL" in str(index.dialect_options["sqlite"]["where"])

    def test_lifecycle_columns(self):
        table = option_model(get_option_kind("country_option")).__table__
        assert {"name", "description", "created_at", "updated_at", "deleted_at"} <= set(table.c.keys())
        assert table.c.name.nullable is False
        assert table.c.created_at.nullable is False
