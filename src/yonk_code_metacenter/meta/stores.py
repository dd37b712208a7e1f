"""Metadata store interfaces and implementations.

Every lookup is total: an unknown id or name yields a zero-value
placeholder record (id 0) or an empty collection, never an exception.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Protocol

import yaml

from .models import Enum, EnumValue, Field, Table, TableField

logger = logging.getLogger(__name__)


class TableStore(Protocol):
    def get_all(self) -> list[Table]:
        ...

    def get_by_id(self, table_id: int) -> Table:
        ...

    def get_by_name(self, name: str) -> Table:
        ...


class FieldStore(Protocol):
    def get_by_id(self, field_id: int) -> Field:
        ...

    def get_by_name(self, name: str) -> Field:
        ...

    def find_by_ids(self, field_ids: Iterable[int]) -> dict[int, Field]:
        ...

    def find_by_names(self, names: Iterable[str]) -> dict[str, Field]:
        ...


class EnumStore(Protocol):
    def get_by_id(self, enum_id: int) -> Enum:
        ...

    def find_by_ids(self, enum_ids: Iterable[int]) -> dict[int, Enum]:
        ...


class EnumValueStore(Protocol):
    def find_by_enum_id(self, enum_id: int) -> list[EnumValue]:
        ...


class TableFieldStore(Protocol):
    def get_fields(self, table_id: int) -> dict[int, TableField]:
        """Return field_id -> association for a table."""
        ...

    def get_association(self, table_id: int, field_id: int) -> TableField:
        ...


# ============================================================================
# No-op defaults
# ============================================================================

class DefaultTableStore:
    def get_all(self) -> list[Table]:
        return []

    def get_by_id(self, table_id: int) -> Table:
        return Table()

    def get_by_name(self, name: str) -> Table:
        return Table()


class DefaultFieldStore:
    def get_by_id(self, field_id: int) -> Field:
        return Field()

    def get_by_name(self, name: str) -> Field:
        return Field()

    def find_by_ids(self, field_ids: Iterable[int]) -> dict[int, Field]:
        return {}

    def find_by_names(self, names: Iterable[str]) -> dict[str, Field]:
        return {}


class DefaultEnumStore:
    def get_by_id(self, enum_id: int) -> Enum:
        return Enum()

    def find_by_ids(self, enum_ids: Iterable[int]) -> dict[int, Enum]:
        return {}


class DefaultEnumValueStore:
    def find_by_enum_id(self, enum_id: int) -> list[EnumValue]:
        return []


class DefaultTableFieldStore:
    def get_fields(self, table_id: int) -> dict[int, TableField]:
        return {}

    def get_association(self, table_id: int, field_id: int) -> TableField:
        return TableField()


# ============================================================================
# In-memory store
# ============================================================================

class InMemoryTableStore:
    def __init__(self, tables: Iterable[Table]):
        self._by_id = {t.id: t for t in tables}
        self._by_name = {t.name: t for t in self._by_id.values()}

    def get_all(self) -> list[Table]:
        return [self._by_id[i].model_copy(deep=True) for i in sorted(self._by_id)]

    def get_by_id(self, table_id: int) -> Table:
        table = self._by_id.get(table_id)
        if table is None:
            logger.warning(f"Table not found: id={table_id}")
            return Table()
        return table.model_copy(deep=True)

    def get_by_name(self, name: str) -> Table:
        table = self._by_name.get(name)
        if table is None:
            logger.warning(f"Table not found: name={name}")
            return Table()
        return table.model_copy(deep=True)


class InMemoryFieldStore:
    def __init__(self, fields: Iterable[Field]):
        self._by_id = {f.id: f for f in fields}
        self._by_name = {f.name: f for f in self._by_id.values()}

    def get_by_id(self, field_id: int) -> Field:
        field = self._by_id.get(field_id)
        if field is None:
            logger.warning(f"Field not found: id={field_id}")
            return Field()
        return field.model_copy(deep=True)

    def get_by_name(self, name: str) -> Field:
        field = self._by_name.get(name)
        return field.model_copy(deep=True) if field is not None else Field()

    def find_by_ids(self, field_ids: Iterable[int]) -> dict[int, Field]:
        return {
            i: self._by_id[i].model_copy(deep=True)
            for i in field_ids if i in self._by_id
        }

    def find_by_names(self, names: Iterable[str]) -> dict[str, Field]:
        return {
            n: self._by_name[n].model_copy(deep=True)
            for n in names if n in self._by_name
        }


class InMemoryEnumStore:
    def __init__(self, enums: Iterable[Enum]):
        self._by_id = {e.id: e for e in enums}

    def get_by_id(self, enum_id: int) -> Enum:
        enum = self._by_id.get(enum_id)
        return enum.model_copy(deep=True) if enum is not None else Enum()

    def find_by_ids(self, enum_ids: Iterable[int]) -> dict[int, Enum]:
        return {
            i: self._by_id[i].model_copy(deep=True)
            for i in enum_ids if i in self._by_id
        }


class InMemoryEnumValueStore:
    def __init__(self, values: Iterable[EnumValue]):
        self._by_enum: dict[int, list[EnumValue]] = {}
        for value in values:
            self._by_enum.setdefault(value.enum_id, []).append(value)

    def find_by_enum_id(self, enum_id: int) -> list[EnumValue]:
        return [v.model_copy() for v in self._by_enum.get(enum_id, [])]


class InMemoryTableFieldStore:
    def __init__(self, associations: Iterable[TableField]):
        self._by_table: dict[int, dict[int, TableField]] = {}
        for assoc in associations:
            self._by_table.setdefault(assoc.table_id, {})[assoc.field_id] = assoc

    def get_fields(self, table_id: int) -> dict[int, TableField]:
        return dict(self._by_table.get(table_id, {}))

    def get_association(self, table_id: int, field_id: int) -> TableField:
        assoc = self._by_table.get(table_id, {}).get(field_id)
        return assoc.model_copy() if assoc is not None else TableField()


class InMemoryMetadataStore:
    """Metadata records held in memory, with one view per store interface.

    Lookups hand out copies, so aggregating a table never mutates the
    stored records.
    """

    def __init__(
        self,
        tables: Iterable[Table] = (),
        fields: Iterable[Field] = (),
        enums: Iterable[Enum] = (),
        enum_values: Iterable[EnumValue] = (),
        table_fields: Iterable[TableField] = (),
    ):
        self.tables = InMemoryTableStore(tables)
        self.fields = InMemoryFieldStore(fields)
        self.enums = InMemoryEnumStore(enums)
        self.enum_values = InMemoryEnumValueStore(enum_values)
        self.table_fields = InMemoryTableFieldStore(table_fields)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InMemoryMetadataStore:
        """Build a store from plain records.

        Args:
            data: Mapping with optional "tables", "fields", "enums",
                  "enum_values" and "table_fields" lists

        Returns:
            Populated store
        """
        return cls(
            tables=[Table.model_validate(r) for r in data.get("tables") or []],
            fields=[Field.model_validate(r) for r in data.get("fields") or []],
            enums=[Enum.model_validate(r) for r in data.get("enums") or []],
            enum_values=[EnumValue.model_validate(r) for r in data.get("enum_values") or []],
            table_fields=[TableField.model_validate(r) for r in data.get("table_fields") or []],
        )

    @classmethod
    def from_yaml(cls, path: str | Path) -> InMemoryMetadataStore:
        """Load a store from a YAML document.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the records are invalid
        """
        store_path = Path(path)

        if not store_path.exists():
            raise FileNotFoundError(f"Metadata file not found: {store_path}")

        with open(store_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        try:
            store = cls.from_dict(data)
        except Exception as e:
            raise ValueError(f"Invalid metadata in {store_path}: {e}") from e

        logger.info(f"Loaded metadata store from {store_path}")
        return store
