"""Identifier casing for generated source."""
from __future__ import annotations

import keyword
import re

from pydantic import BaseModel

_SEPARATOR_RE = re.compile(r"[\W_]+")
_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")

# Names a generated model module binds or relies on at class level
MODEL_RESERVED_NAMES = frozenset({
    "Any", "Annotated", "BaseModel", "ConfigDict", "Decimal", "Field", "Optional",
    "Int32", "Int64", "UInt32", "UInt64",
    "bool", "bytes", "date", "datetime", "dict", "float", "int", "list", "str",
})


def to_camel(name: str) -> str:
    """task_status -> TaskStatus, t_test -> TTest, userId -> UserId."""
    return "".join(part[:1].upper() + part[1:] for part in _SEPARATOR_RE.split(name) if part)


def to_constant(name: str) -> str:
    """task_status -> TASK_STATUS, TaskStatusWait -> TASK_STATUS_WAIT."""
    words: list[str] = []
    for part in _SEPARATOR_RE.split(name):
        if part:
            words.extend(_CAMEL_BOUNDARY_RE.split(part))
    return "_".join(words).upper()


def safe_identifier(name: str) -> str:
    """Make a name usable as a Python identifier."""
    if not name or not (name[0].isalpha() or name[0] == "_"):
        name = f"_{name}"
    if keyword.iskeyword(name):
        name = f"{name}_"
    return name


def attribute_name(name: str) -> str:
    """Column name as a model attribute: "from" -> "from_", "order-id" -> "order_id".

    Names that would shadow a type or helper of the generated module, or an
    attribute of BaseModel, get a trailing underscore: "datetime" -> "datetime_".
    """
    if not name.isidentifier():
        name = _SEPARATOR_RE.sub("_", name).strip("_")
    name = safe_identifier(name)
    if name in MODEL_RESERVED_NAMES or hasattr(BaseModel, name):
        name = f"{name}_"
    return name


def package_name(table_name: str, table_id: int) -> str:
    """Lower-cased table name without separators, suffixed with the table id.

    Tables sharing a name but not an id get distinct packages.
    """
    return _SEPARATOR_RE.sub("", table_name.lower()) + str(table_id)
