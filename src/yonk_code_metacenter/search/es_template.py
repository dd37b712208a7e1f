"""Elasticsearch index template synthesis.

Field mappings by logical type:

    int       -> long
    uint      -> unsigned_long
    float64   -> double
    datetime  -> date (explicit format, malformed values ignored)
    enum      -> long for int/uint values, keyword otherwise
    json      -> nested
    other     -> keyword, or analyzed text with a keyword sub-field when
                 the field's search hint is "text"

Settings carry max_result_window only when it is set. A zero window is
rejected by Elasticsearch, so an unset window is left out of the document
rather than written as 0.
"""
from __future__ import annotations

import json
import logging
from typing import Any

from ..config.settings import SearchTemplateConfig
from ..meta.data_types import (
    DATA_TYPE_DATETIME,
    DATA_TYPE_ENUM,
    DATA_TYPE_FLOAT,
    DATA_TYPE_INT,
    DATA_TYPE_JSON,
    DATA_TYPE_UINT,
    DataTypeGetter,
    LogicalTypeRegistry,
)
from ..meta.models import Field, Table

logger = logging.getLogger(__name__)

SEARCH_HINT_TEXT = "text"


class SearchTemplateSynthesizer:
    """Builds index template documents from Table aggregates."""

    def __init__(
        self,
        data_types: DataTypeGetter | None = None,
        config: SearchTemplateConfig | None = None,
    ):
        self.data_types = data_types or LogicalTypeRegistry()
        self.config = config or SearchTemplateConfig()

    def synthesize(self, table: Table) -> dict[str, Any]:
        index = table.es_config.index
        pattern = index.name_or_prefix + "*" if index.multi_index else index.name_or_prefix

        settings: dict[str, int] = {}
        if index.max_result_window:
            settings["max_result_window"] = index.max_result_window
        settings["number_of_shards"] = index.number_of_shards or self.config.number_of_shards
        settings["number_of_replicas"] = index.number_of_replicas or self.config.number_of_replicas

        properties = {f.name: self.field_mapping(f) for f in table.fields}

        return {
            "index_patterns": [pattern],
            "template": {
                "settings": settings,
                "mappings": {
                    "_source": {"enabled": True},
                    "properties": properties,
                },
            },
            "priority": self.config.priority,
            "version": self.config.version,
        }

    def to_json(self, table: Table) -> str:
        """Serialise the template; identical tables give identical text."""
        doc = self.synthesize(table)
        logger.debug(f"Synthesized index template for {table.name} with {len(table.fields)} fields")
        return json.dumps(doc, ensure_ascii=False)

    def field_mapping(self, field: Field) -> dict[str, Any]:
        type_name = self.data_types.resolve_by_id(field.type_id).name

        if type_name == DATA_TYPE_INT:
            mapping: dict[str, Any] = {"type": "long"}
        elif type_name == DATA_TYPE_UINT:
            mapping = {"type": "unsigned_long"}
        elif type_name == DATA_TYPE_FLOAT:
            mapping = {"type": "double"}
        elif type_name == DATA_TYPE_DATETIME:
            mapping = {"type": "date", "format": self.config.date_format, "ignore_malformed": True}
        elif type_name == DATA_TYPE_ENUM:
            mapping = {"type": "keyword"}
            if field.enum is not None:
                value_type = self.data_types.resolve_by_id(field.enum.value_type_id).name
                if value_type in (DATA_TYPE_INT, DATA_TYPE_UINT):
                    mapping = {"type": "long"}
            else:
                logger.warning(f"Enum field {field.name} has no resolved enum, mapping as keyword")
        elif type_name == DATA_TYPE_JSON:
            mapping = {"type": "nested"}
        elif field.search_field_hint == SEARCH_HINT_TEXT:
            mapping = {
                "type": "text",
                "search_analyzer": self.config.search_analyzer,
                "analyzer": self.config.analyzer,
                "fields": {"keyword": {"type": "keyword"}},
            }
        else:
            mapping = {"type": "keyword"}

        return _sorted_keys(mapping)


def _sorted_keys(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _sorted_keys(value[k]) for k in sorted(value)}
    return value
