"""Data type registries.

Two registries ship with the package:

- LogicalTypeRegistry: the seven logical kinds every record refers to
  through Field.type_id and Enum.value_type_id.
- HostTypeRegistry: Python type names used by generated artifacts. Its
  by-id table is keyed by logical type id; its name resolver maps physical
  SQL type tokens by substring convention (see resolve_by_name).

Both are immutable once built and safe to share between threads. Every
lookup is total: a miss returns UNKNOWN_DATA_TYPE instead of raising.
"""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Protocol


@dataclass(frozen=True)
class DataType:
    """A scalar type descriptor."""
    id: int
    name: str
    display_name: str = ""
    is_numeric: bool = False


UNKNOWN_DATA_TYPE = DataType(id=0, name="")

# Logical type names
DATA_TYPE_INT = "int"
DATA_TYPE_UINT = "uint"
DATA_TYPE_STRING = "string"
DATA_TYPE_FLOAT = "float64"
DATA_TYPE_DATETIME = "datetime"
DATA_TYPE_ENUM = "enum"
DATA_TYPE_JSON = "json"

LOGICAL_DATA_TYPES = (
    DataType(1, DATA_TYPE_INT, "Integer", True),
    DataType(2, DATA_TYPE_STRING, "String", False),
    DataType(3, DATA_TYPE_UINT, "Unsigned integer", True),
    DataType(4, DATA_TYPE_FLOAT, "Float", True),
    DataType(5, DATA_TYPE_DATETIME, "Datetime", False),
    DataType(6, DATA_TYPE_ENUM, "Enumeration", False),
    DataType(7, DATA_TYPE_JSON, "JSON", False),
)

# Host (Python) type names, as written into generated source
HOST_TYPE_INT32 = "Int32"
HOST_TYPE_INT64 = "Int64"
HOST_TYPE_UINT32 = "UInt32"
HOST_TYPE_UINT64 = "UInt64"
HOST_TYPE_FLOAT = "float"
HOST_TYPE_DECIMAL = "Decimal"
HOST_TYPE_DATETIME = "datetime"
HOST_TYPE_DATE = "date"
HOST_TYPE_STRING = "str"
HOST_TYPE_JSON = "Any"

HOST_DATA_TYPES = (
    DataType(1, HOST_TYPE_INT32, "int32", True),
    DataType(2, HOST_TYPE_INT64, "int64", True),
    DataType(3, HOST_TYPE_UINT32, "uint32", True),
    DataType(4, HOST_TYPE_UINT64, "uint64", True),
    DataType(5, HOST_TYPE_FLOAT, "float64", True),
    DataType(6, HOST_TYPE_DECIMAL, "decimal", True),
    DataType(7, HOST_TYPE_DATETIME, "datetime", False),
    DataType(8, HOST_TYPE_DATE, "date", False),
    DataType(9, HOST_TYPE_STRING, "string", False),
    DataType(10, HOST_TYPE_JSON, "json", False),
)


class DataTypeGetter(Protocol):
    """Resolves data types by id or by name."""

    def resolve_by_id(self, type_id: int) -> DataType:
        ...

    def resolve_by_name(self, name: str) -> DataType:
        ...


class DataTypeRegistry:
    """Immutable id/name lookup over a fixed set of data types."""

    def __init__(self, data_types: Iterable[DataType]):
        types = tuple(data_types)
        self._by_id: Mapping[int, DataType] = MappingProxyType({t.id: t for t in types})
        self._by_name: Mapping[str, DataType] = MappingProxyType({t.name: t for t in types})

    def resolve_by_id(self, type_id: int) -> DataType:
        return self._by_id.get(type_id, UNKNOWN_DATA_TYPE)

    def resolve_by_name(self, name: str) -> DataType:
        return self._by_name.get(name, UNKNOWN_DATA_TYPE)

    def __iter__(self) -> Iterator[DataType]:
        return iter(self._by_id.values())

    def __len__(self) -> int:
        return len(self._by_id)


class LogicalTypeRegistry(DataTypeRegistry):
    """The canonical logical types: int, uint, string, float64, datetime, enum, json."""

    def __init__(self) -> None:
        super().__init__(LOGICAL_DATA_TYPES)


class HostTypeRegistry(DataTypeRegistry):
    """Python type names for generated artifacts.

    resolve_by_id takes a *logical* type id and returns the host type used
    for it. resolve_by_name maps a physical SQL type token (e.g.
    "bigint unsigned", "decimal(10,2)") to a host type.

    The name resolver is a convention-matching heuristic, not a type-system
    contract. After an exact host-name match, it checks in order:

    1. "int": "big" selects 64 bit, "unsigned" selects the unsigned variant
    2. "float" or "double"
    3. "time"
    4. "decimal"
    5. anything else is a string

    So "point" resolves to Int32 and "DATE" resolves to str.
    """

    def __init__(self, float_as_decimal: bool = False):
        super().__init__(HOST_DATA_TYPES)
        by_name = self._by_name
        logical = {t.name: t.id for t in LOGICAL_DATA_TYPES}
        self._by_logical_id: Mapping[int, DataType] = MappingProxyType({
            logical[DATA_TYPE_INT]: by_name[HOST_TYPE_INT64],
            logical[DATA_TYPE_UINT]: by_name[HOST_TYPE_UINT64],
            logical[DATA_TYPE_STRING]: by_name[HOST_TYPE_STRING],
            logical[DATA_TYPE_FLOAT]: by_name[HOST_TYPE_DECIMAL if float_as_decimal else HOST_TYPE_FLOAT],
            logical[DATA_TYPE_DATETIME]: by_name[HOST_TYPE_DATETIME],
            logical[DATA_TYPE_ENUM]: by_name[HOST_TYPE_STRING],
            logical[DATA_TYPE_JSON]: by_name[HOST_TYPE_JSON],
        })

    def resolve_by_id(self, type_id: int) -> DataType:
        return self._by_logical_id.get(type_id, UNKNOWN_DATA_TYPE)

    def resolve_by_name(self, name: str) -> DataType:
        if name in self._by_name:
            return self._by_name[name]

        token = name.lower()
        if "int" in token:
            if "big" in token:
                host_name = HOST_TYPE_UINT64 if "unsigned" in token else HOST_TYPE_INT64
            else:
                host_name = HOST_TYPE_UINT32 if "unsigned" in token else HOST_TYPE_INT32
        elif "float" in token or "double" in token:
            host_name = HOST_TYPE_FLOAT
        elif "time" in token:
            host_name = HOST_TYPE_DATETIME
        elif "decimal" in token:
            host_name = HOST_TYPE_DECIMAL
        else:
            host_name = HOST_TYPE_STRING
        return self._by_name[host_name]
