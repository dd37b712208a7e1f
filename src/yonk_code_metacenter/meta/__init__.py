"""Metadata records, type registries, stores and aggregation.

The MetaCenter facade lives in .center and is imported from there.
"""
from __future__ import annotations

from .models import (
    DBConfig,
    ESConfig,
    Enum,
    EnumValue,
    Field,
    IndexConfig,
    Table,
    TableField,
)

from .data_types import (
    UNKNOWN_DATA_TYPE,
    DataType,
    DataTypeGetter,
    DataTypeRegistry,
    HostTypeRegistry,
    LogicalTypeRegistry,
)

from .stores import (
    EnumStore,
    EnumValueStore,
    FieldStore,
    InMemoryMetadataStore,
    TableFieldStore,
    TableStore,
)

from .aggregator import MetadataAggregator

__all__ = [
    # Records
    "DBConfig",
    "ESConfig",
    "Enum",
    "EnumValue",
    "Field",
    "IndexConfig",
    "Table",
    "TableField",
    # Registries
    "UNKNOWN_DATA_TYPE",
    "DataType",
    "DataTypeGetter",
    "DataTypeRegistry",
    "HostTypeRegistry",
    "LogicalTypeRegistry",
    # Stores
    "EnumStore",
    "EnumValueStore",
    "FieldStore",
    "InMemoryMetadataStore",
    "TableFieldStore",
    "TableStore",
    "MetadataAggregator",
]
