"""Assemble a full Table aggregate from independently stored records."""
from __future__ import annotations

import logging
from typing import Optional

from .models import Table
from .stores import EnumStore, EnumValueStore, FieldStore, TableFieldStore

logger = logging.getLogger(__name__)


class MetadataAggregator:
    """Resolves a table's fields, their enums and the enums' values.

    aggregate() mutates the table it is given and must be called once per
    fresh Table instance. Calling it again on the same instance appends
    every field a second time.
    """

    def __init__(
        self,
        table_field_store: TableFieldStore,
        field_store: FieldStore,
        enum_store: EnumStore,
        enum_value_store: EnumValueStore,
    ):
        self.table_field_store = table_field_store
        self.field_store = field_store
        self.enum_store = enum_store
        self.enum_value_store = enum_value_store

    def aggregate(self, table: Optional[Table]) -> Optional[Table]:
        if table is None:
            return None

        field_ids = sorted(self.table_field_store.get_fields(table.id))
        for field_id in field_ids:
            field = self.field_store.get_by_id(field_id)

            if field.enum_id:
                enum = self.enum_store.get_by_id(field.enum_id)
                if enum.id:
                    for value in self.enum_value_store.find_by_enum_id(enum.id):
                        enum.add_value(value)
                    field.enum = enum
                else:
                    logger.warning(
                        f"Enum {field.enum_id} of field {field.name} not found in table {table.name}"
                    )

            table.add_field(field)

        logger.debug(f"Aggregated table {table.name} (id={table.id}) with {len(field_ids)} fields")
        return table
