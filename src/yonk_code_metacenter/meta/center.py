"""MetaCenter facade: stored metadata, DDL parsing, generation and search templates."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

from ..codegen.generator import ArtifactGenerator, GenerateParam
from ..config.settings import MetaCenterConfig
from ..search.es_template import SearchTemplateSynthesizer
from ..sql_schema.ddl_extractor import DDLExtractor
from .aggregator import MetadataAggregator
from .data_types import DataTypeGetter, HostTypeRegistry, LogicalTypeRegistry
from .models import Table
from .stores import (
    DefaultEnumStore,
    DefaultEnumValueStore,
    DefaultFieldStore,
    DefaultTableFieldStore,
    DefaultTableStore,
    EnumStore,
    EnumValueStore,
    FieldStore,
    InMemoryMetadataStore,
    TableFieldStore,
    TableStore,
)

logger = logging.getLogger(__name__)


class MetaCenter:
    """Entry point tying stores, registries and generators together.

    Every collaborator is injected; anything left out falls back to a
    no-op store or a default-configured component.
    """

    def __init__(
        self,
        table_store: TableStore | None = None,
        field_store: FieldStore | None = None,
        enum_store: EnumStore | None = None,
        enum_value_store: EnumValueStore | None = None,
        table_field_store: TableFieldStore | None = None,
        data_types: DataTypeGetter | None = None,
        ddl_extractor: DDLExtractor | None = None,
        generator: ArtifactGenerator | None = None,
        search: SearchTemplateSynthesizer | None = None,
    ):
        self.table_store = table_store or DefaultTableStore()
        self.data_types = data_types or LogicalTypeRegistry()
        self.aggregator = MetadataAggregator(
            table_field_store=table_field_store or DefaultTableFieldStore(),
            field_store=field_store or DefaultFieldStore(),
            enum_store=enum_store or DefaultEnumStore(),
            enum_value_store=enum_value_store or DefaultEnumValueStore(),
        )
        self.ddl_extractor = ddl_extractor or DDLExtractor(self.data_types)
        self.generator = generator or ArtifactGenerator(HostTypeRegistry())
        self.search = search or SearchTemplateSynthesizer(self.data_types)

    @classmethod
    def from_store(cls, store: InMemoryMetadataStore, **kwargs) -> MetaCenter:
        return cls(
            table_store=store.tables,
            field_store=store.fields,
            enum_store=store.enums,
            enum_value_store=store.enum_values,
            table_field_store=store.table_fields,
            **kwargs,
        )

    @classmethod
    def from_config(cls, config: MetaCenterConfig) -> MetaCenter:
        """Build a MetaCenter from configuration.

        Raises:
            FileNotFoundError: If store.path is set but missing
            ValueError: If the metadata file is invalid
        """
        data_types = LogicalTypeRegistry()
        components = dict(
            data_types=data_types,
            ddl_extractor=DDLExtractor(
                data_types,
                dialect=config.ddl.dialect,
                strip_patterns=config.ddl.strip_patterns,
            ),
            generator=ArtifactGenerator(
                HostTypeRegistry(float_as_decimal=config.generation.float_as_decimal),
                formatter=config.generation.formatter,
                skip_retired=config.generation.skip_retired_enum_values,
            ),
            search=SearchTemplateSynthesizer(data_types, config.search),
        )

        if config.store.path:
            return cls.from_store(InMemoryMetadataStore.from_yaml(config.store.path), **components)
        return cls(**components)

    def get_table_by_name(self, name: str) -> Optional[Table]:
        """Aggregated table, or None when the store doesn't know the name."""
        return self._aggregate(self.table_store.get_by_name(name))

    def get_table_by_id(self, table_id: int) -> Optional[Table]:
        return self._aggregate(self.table_store.get_by_id(table_id))

    def get_all_tables(self) -> list[Table]:
        return [self.aggregator.aggregate(t) for t in self.table_store.get_all()]

    def parse_from_ddl(self, ddl: str) -> Table:
        """Extract a Table from DDL text.

        Raises:
            MalformedStatementError: If the DDL holds no CREATE TABLE statement
        """
        return self.ddl_extractor.extract_from_ddl(ddl)

    def generate_files(self, tables: Iterable[Table], params: Iterable[GenerateParam]) -> list[Path]:
        """Write generated artifacts.

        Raises:
            ArtifactGenerationError: On the first template, write or formatter failure
        """
        return self.generator.generate(tables, params)

    def to_search_template(self, table: Table) -> str:
        return self.search.to_json(table)

    def _aggregate(self, table: Table) -> Optional[Table]:
        if not table.id and not table.name:
            return None
        return self.aggregator.aggregate(table)
