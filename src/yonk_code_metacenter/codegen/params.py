"""Template parameters built from a Table aggregate."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..meta.data_types import HOST_TYPE_DECIMAL, HOST_TYPE_JSON, DataTypeGetter
from ..meta.models import Field, Table
from .naming import attribute_name, package_name, safe_identifier, to_camel, to_constant

logger = logging.getLogger(__name__)


@dataclass
class TemplateTable:
    var_name: str  # TaskInfo
    const_name: str  # TASK_INFO
    name: str
    display_name: str


@dataclass
class TemplateEnumValue:
    var_name: str  # TaskStatusWait
    const_name: str  # TASK_STATUS_WAIT
    display_name: str
    literal: str


@dataclass
class TemplateField:
    """One field as seen by the templates."""
    var_name: str  # TaskStatus
    attr_name: str  # task_status, safe as a Python attribute
    const_name: str  # TASK_STATUS
    name: str
    display_name: str
    type: str  # host type name; for enum fields the enum's value type
    is_numeric: bool = False
    is_enum: bool = False
    is_primary_key: bool = False
    is_auto_increment: bool = False
    enum_is_int: bool = False  # numeric enum whose literals are all integers
    enum_display_name: str = ""
    enum_values: list[TemplateEnumValue] = field(default_factory=list)


@dataclass
class GenerationParams:
    """Everything a template receives for one table."""
    package_name: str
    table: TemplateTable
    fields: list[TemplateField] = field(default_factory=list)
    pk_fields: list[TemplateField] = field(default_factory=list)
    has_enum: bool = False
    has_decimal: bool = False
    type_names: list[str] = field(default_factory=list)
    inject_params: list[str] = field(default_factory=list)


def build_template_params(
    table: Table,
    data_types: DataTypeGetter,
    inject_params: list[str] | None = None,
    skip_retired: bool = False,
) -> GenerationParams:
    """Flatten a Table aggregate into template parameters.

    Args:
        table: Aggregated table (fields and enums resolved)
        data_types: Host registry, keyed by logical type id
        inject_params: Free-form strings passed through to templates
        skip_retired: Leave retired enum values out

    Returns:
        GenerationParams with fields in table order
    """
    params = GenerationParams(
        package_name=package_name(table.name, table.id),
        table=TemplateTable(
            var_name=safe_identifier(to_camel(table.name)),
            const_name=safe_identifier(to_constant(table.name)),
            name=table.name,
            display_name=table.display_name,
        ),
        inject_params=list(inject_params or []),
    )

    type_names: set[str] = set()
    for f in table.fields:
        tf = _build_field(f, data_types, skip_retired)
        if not tf.type:
            logger.warning(f"Unknown type id {f.type_id} for field {table.name}.{f.name}, using {HOST_TYPE_JSON}")
            tf.type = HOST_TYPE_JSON
        params.fields.append(tf)
        if tf.is_primary_key:
            params.pk_fields.append(tf)
        if tf.is_enum:
            params.has_enum = True
        if tf.type == HOST_TYPE_DECIMAL:
            params.has_decimal = True
        type_names.add(tf.type)

    params.type_names = sorted(type_names)
    logger.debug(
        f"Built template params for {table.name}: package={params.package_name}, "
        f"fields={len(params.fields)}, enums={params.has_enum}"
    )
    return params


def _build_field(f: Field, data_types: DataTypeGetter, skip_retired: bool) -> TemplateField:
    var_name = to_camel(f.name)
    data_type = data_types.resolve_by_id(f.type_id)

    tf = TemplateField(
        var_name=safe_identifier(var_name),
        attr_name=attribute_name(f.name),
        const_name=safe_identifier(to_constant(f.name)),
        name=f.name,
        display_name=f.display_name,
        type=data_type.name,
        is_numeric=data_type.is_numeric,
        is_primary_key=f.is_primary_key,
        is_auto_increment=f.is_auto_increment,
    )

    if f.enum is None:
        return tf

    value_type = data_types.resolve_by_id(f.enum.value_type_id)
    tf.is_enum = True
    tf.type = value_type.name
    tf.is_numeric = value_type.is_numeric
    tf.enum_display_name = f.enum.display_name

    values = f.enum.active_values() if skip_retired else f.enum.values
    seen: dict[str, int] = {}
    for value in values:
        var_name = safe_identifier(to_camel(value.symbolic_name))
        const_name = safe_identifier(to_constant(value.symbolic_name))
        # Keys differing only by case collapse to one member name
        count = seen.get(const_name, 0) + 1
        seen[const_name] = count
        if count > 1:
            logger.warning(
                f"Duplicate enum member {const_name} for field {f.name}, renamed to {const_name}_{count}"
            )
            var_name = f"{var_name}{count}"
            const_name = f"{const_name}_{count}"
        tf.enum_values.append(TemplateEnumValue(
            var_name=var_name,
            const_name=const_name,
            display_name=value.display_name,
            literal=value.literal,
        ))
    tf.enum_is_int = tf.is_numeric and all(_is_int_literal(v.literal) for v in tf.enum_values)
    return tf


def _is_int_literal(literal: str) -> bool:
    digits = literal.removeprefix("-")
    return digits.isascii() and digits.isdigit()
