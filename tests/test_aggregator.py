"""Tests for table aggregation."""
import logging

from yonk_code_metacenter.meta.aggregator import MetadataAggregator
from yonk_code_metacenter.meta.models import Table
from yonk_code_metacenter.meta.stores import (
    DefaultEnumStore,
    DefaultEnumValueStore,
    DefaultFieldStore,
    DefaultTableFieldStore,
)


def make_aggregator(store):
    return MetadataAggregator(
        table_field_store=store.table_fields,
        field_store=store.fields,
        enum_store=store.enums,
        enum_value_store=store.enum_values,
    )


class TestAggregate:
    """Fields, enums and enum values are resolved onto the table."""

    def test_fields_in_ascending_id_order(self, metadata_store):
        table = make_aggregator(metadata_store).aggregate(metadata_store.tables.get_by_id(1))

        assert [f.id for f in table.fields] == [1, 2, 3, 4, 5, 6, 9]
        assert set(table.fields_by_name) == {f.name for f in table.fields}

    def test_enum_resolved(self, metadata_store):
        table = make_aggregator(metadata_store).aggregate(metadata_store.tables.get_by_name("task_info"))
        field = table.fields_by_name["task_status"]

        assert field.enum is not None
        assert field.enum.id == 1
        assert [v.literal for v in field.enum.values] == ["1", "2", "3"]
        assert field.enum.values_by_literal["2"].symbolic_name == "TaskStatusRunning"

    def test_plain_fields_have_no_enum(self, metadata_store):
        table = make_aggregator(metadata_store).aggregate(metadata_store.tables.get_by_id(1))

        assert table.fields_by_name["title"].enum is None

    def test_missing_enum(self, metadata_store, caplog):
        """Should leave the enum unset and warn when enum_id doesn't resolve."""
        with caplog.at_level(logging.WARNING):
            table = make_aggregator(metadata_store).aggregate(metadata_store.tables.get_by_name("user"))

        category = table.fields_by_name["category"]
        assert category.enum_id == 99
        assert category.enum is None
        assert "Enum 99" in caplog.text

    def test_none_passthrough(self, metadata_store):
        assert make_aggregator(metadata_store).aggregate(None) is None

    def test_default_stores(self):
        """Should produce an empty aggregate from no-op stores."""
        aggregator = MetadataAggregator(
            DefaultTableFieldStore(), DefaultFieldStore(), DefaultEnumStore(), DefaultEnumValueStore()
        )

        assert aggregator.aggregate(Table(id=1, name="t")).fields == []


class TestSingleUseContract:
    """Aggregating the same instance twice duplicates its fields."""

    def test_reaggregation_duplicates(self, metadata_store):
        aggregator = make_aggregator(metadata_store)
        table = aggregator.aggregate(metadata_store.tables.get_by_id(2))
        assert len(table.fields) == 3

        aggregator.aggregate(table)

        assert len(table.fields) == 6
        assert [f.id for f in table.fields] == [1, 7, 8, 1, 7, 8]

    def test_fresh_instances_are_independent(self, metadata_store):
        """Should give the same result for each fresh table."""
        aggregator = make_aggregator(metadata_store)
        first = aggregator.aggregate(metadata_store.tables.get_by_id(1))
        second = aggregator.aggregate(metadata_store.tables.get_by_id(1))

        assert first.model_dump() == second.model_dump()
        assert first.fields[1].enum is not second.fields[1].enum
