"""Tests for search index template synthesis."""
import json

import pytest

from yonk_code_metacenter.config.settings import SearchTemplateConfig
from yonk_code_metacenter.meta.aggregator import MetadataAggregator
from yonk_code_metacenter.meta.models import Enum, Field, Table
from yonk_code_metacenter.search.es_template import SearchTemplateSynthesizer
from yonk_code_metacenter.sql_schema.ddl_extractor import DDLExtractor


@pytest.fixture
def synthesizer(logical_types):
    return SearchTemplateSynthesizer(logical_types)


@pytest.fixture
def stored_table(metadata_store):
    aggregator = MetadataAggregator(
        metadata_store.table_fields, metadata_store.fields,
        metadata_store.enums, metadata_store.enum_values,
    )
    return aggregator.aggregate(metadata_store.tables.get_by_id(1))


# =============================================================================
# Field mappings
# =============================================================================

class TestFieldMappings:
    """One mapping per logical type."""

    @pytest.mark.parametrize("type_id,expected", [
        (1, {"type": "long"}),
        (2, {"type": "keyword"}),
        (3, {"type": "unsigned_long"}),
        (4, {"type": "double"}),
        (5, {"format": "yyyy-MM-dd HH:mm:ss", "ignore_malformed": True, "type": "date"}),
        (7, {"type": "nested"}),
        (0, {"type": "keyword"}),
    ])
    def test_mapping_table(self, synthesizer, type_id, expected):
        assert synthesizer.field_mapping(Field(name="f", type_id=type_id)) == expected

    @pytest.mark.parametrize("value_type_id,expected", [
        (1, "long"),
        (3, "long"),
        (2, "keyword"),
        (4, "keyword"),
    ])
    def test_enum_value_type(self, synthesizer, value_type_id, expected):
        field = Field(name="f", type_id=6, enum=Enum(value_type_id=value_type_id))

        assert synthesizer.field_mapping(field) == {"type": expected}

    def test_unresolved_enum(self, synthesizer):
        assert synthesizer.field_mapping(Field(name="f", type_id=6, enum_id=5)) == {"type": "keyword"}

    def test_text_hint(self, synthesizer):
        """Should produce an analyzed field with a keyword sub-field."""
        mapping = synthesizer.field_mapping(Field(name="f", type_id=2, search_field_hint="text"))

        assert mapping == {
            "analyzer": "ik_max_word",
            "fields": {"keyword": {"type": "keyword"}},
            "search_analyzer": "ik_smart",
            "type": "text",
        }
        assert list(mapping) == ["analyzer", "fields", "search_analyzer", "type"]

    def test_text_hint_only_for_strings(self, synthesizer):
        field = Field(name="f", type_id=1, search_field_hint="text")

        assert synthesizer.field_mapping(field) == {"type": "long"}

    def test_configured_defaults(self, logical_types):
        config = SearchTemplateConfig(date_format="epoch_millis", analyzer="standard", search_analyzer="simple")
        synthesizer = SearchTemplateSynthesizer(logical_types, config)

        assert synthesizer.field_mapping(Field(type_id=5))["format"] == "epoch_millis"
        text = synthesizer.field_mapping(Field(type_id=2, search_field_hint="text"))
        assert (text["analyzer"], text["search_analyzer"]) == ("standard", "simple")


# =============================================================================
# Template document
# =============================================================================

class TestTemplateDocument:
    def test_stored_table(self, synthesizer, stored_table):
        doc = synthesizer.synthesize(stored_table)

        assert doc["index_patterns"] == ["task_info*"]
        assert doc["template"]["settings"] == {"number_of_shards": 5, "number_of_replicas": 0}
        assert doc["template"]["mappings"]["_source"] == {"enabled": True}
        assert doc["priority"] == 0
        assert doc["version"] == 0

        properties = doc["template"]["mappings"]["properties"]
        assert list(properties) == [f.name for f in stored_table.fields]
        assert properties["task_status"] == {"type": "long"}
        assert properties["priority"] == {"type": "keyword"}
        assert properties["title"]["type"] == "text"
        assert properties["extra"] == {"type": "nested"}
        assert properties["amount"] == {"type": "double"}

    def test_settings_defaults(self, synthesizer):
        doc = synthesizer.synthesize(Table(name="t"))

        assert doc["index_patterns"] == [""]
        assert doc["template"]["settings"] == {"number_of_shards": 3, "number_of_replicas": 0}

    def test_settings_overrides(self, synthesizer):
        table = Table(name="t")
        table.es_config.index.name_or_prefix = "orders"
        table.es_config.index.max_result_window = 50000
        table.es_config.index.number_of_replicas = 2

        doc = synthesizer.synthesize(table)

        assert doc["index_patterns"] == ["orders"]
        assert doc["template"]["settings"] == {
            "max_result_window": 50000,
            "number_of_shards": 3,
            "number_of_replicas": 2,
        }
        assert list(doc["template"]["settings"])[0] == "max_result_window"

    def test_top_level_keys(self, synthesizer, stored_table):
        assert list(synthesizer.synthesize(stored_table)) == ["index_patterns", "template", "priority", "version"]


class TestJson:
    def test_deterministic(self, synthesizer, stored_table):
        """Should give byte-identical output for the same table."""
        first = synthesizer.to_json(stored_table)
        second = synthesizer.to_json(stored_table)

        assert first == second
        assert json.loads(first) == synthesizer.synthesize(stored_table)

    def test_same_from_fresh_aggregates(self, synthesizer, metadata_store):
        aggregator = MetadataAggregator(
            metadata_store.table_fields, metadata_store.fields,
            metadata_store.enums, metadata_store.enum_values,
        )
        a = aggregator.aggregate(metadata_store.tables.get_by_id(1))
        b = aggregator.aggregate(metadata_store.tables.get_by_id(1))

        assert synthesizer.to_json(a) == synthesizer.to_json(b)

    def test_non_ascii_kept(self, synthesizer):
        table = Table(name="t", fields=[Field(name="名称", type_id=2)])

        assert '"名称"' in synthesizer.to_json(table)

    def test_ddl_table(self, synthesizer, logical_types, task_info_ddl):
        table = DDLExtractor(logical_types).extract_from_ddl(task_info_ddl)
        properties = json.loads(synthesizer.to_json(table))["template"]["mappings"]["properties"]

        assert properties == {
            "id": {"type": "long"},
            "task_status": {"type": "long"},
            "title": {"type": "keyword"},
            "payload": {"type": "nested"},
            "amount": {"type": "double"},
            "created_at": {"format": "yyyy-MM-dd HH:mm:ss", "ignore_malformed": True, "type": "date"},
        }
