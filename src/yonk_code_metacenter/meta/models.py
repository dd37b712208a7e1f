"""
Pydantic records for the metadata center.

Records are read from a metadata store (ids assigned) or synthesized from
DDL (ids left at zero). Lookup maps are rebuilt in memory and never
serialised.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel
from pydantic import Field as ModelField


ENUM_VALUE_ACTIVE = 0
ENUM_VALUE_RETIRED = 1


class IndexConfig(BaseModel):
    """Index settings used when synthesizing a search template."""
    name_or_prefix: str = ""
    multi_index: bool = False
    index_field_id: int = 0
    index_mode: int = 0
    max_result_window: int = 0
    number_of_shards: int = 0
    number_of_replicas: int = 0


class ESConfig(BaseModel):
    """Search cluster settings for a table."""
    address: str = ""
    user: str = ""
    password: str = ""
    index: IndexConfig = ModelField(default_factory=IndexConfig)
    sync: int = 0


class DBConfig(BaseModel):
    """Database connection settings stored alongside a table."""
    address: str = ""
    write_user: str = ""
    write_password: str = ""
    read_user: str = ""
    read_password: str = ""
    charset: str = ""


class EnumValue(BaseModel):
    """A single enumeration member."""
    id: int = 0
    enum_id: int = 0
    symbolic_name: str = ""  # used to build constant names
    display_name: str = ""
    literal: str = ""  # 1/2/3, waiting/start/finish...
    status: int = ENUM_VALUE_ACTIVE
    explain: str = ""

    @property
    def is_retired(self) -> bool:
        return self.status == ENUM_VALUE_RETIRED


class Enum(BaseModel):
    """An enumeration and its ordered members."""
    id: int = 0
    display_name: str = ""
    value_type_id: int = 0
    explain: str = ""
    values: list[EnumValue] = ModelField(default_factory=list)
    values_by_literal: dict[str, EnumValue] = ModelField(default_factory=dict, exclude=True)

    def add_value(self, value: EnumValue) -> None:
        self.values.append(value)
        self.values_by_literal[value.literal] = value

    def active_values(self) -> list[EnumValue]:
        return [v for v in self.values if not v.is_retired]


class Field(BaseModel):
    """A column definition."""
    id: int = 0
    name: str = ""
    display_name: str = ""
    type_id: int = 0
    enum_id: int = 0  # non-zero when type is enum
    search_field_hint: str = ""  # "text" requests an analyzed mapping
    explain: str = ""
    is_primary_key: bool = False
    is_auto_increment: bool = False
    enum: Optional[Enum] = None


class Table(BaseModel):
    """A table and, once aggregated, its fields."""
    id: int = 0
    name: str = ""
    display_name: str = ""
    db_config: DBConfig = ModelField(default_factory=DBConfig)
    es_config: ESConfig = ModelField(default_factory=ESConfig)
    fields: list[Field] = ModelField(default_factory=list)
    fields_by_name: dict[str, Field] = ModelField(default_factory=dict, exclude=True)

    def add_field(self, field: Field) -> None:
        self.fields.append(field)
        self.fields_by_name[field.name] = field


class TableField(BaseModel):
    """Association between a table and one of its fields.

    ref_table_id is set when the field is joined in from another table
    rather than stored physically on table_id.
    """
    id: int = 0
    table_id: int = 0
    field_id: int = 0
    ref_table_id: int = 0
    is_unique: int = 0
    is_primary_key: int = 0
    is_encrypt: int = 0
