"""CREATE TABLE extraction using sqlglot.

Turns the first statement of a DDL script into a Table with its Fields,
mining column comments for display names and inline enumerations.
"""
from __future__ import annotations

import logging
import re
from typing import Iterable, Optional

import sqlglot
from sqlglot import exp
from sqlglot.errors import SqlglotError

from ..codegen.naming import to_camel
from ..errors import MalformedStatementError
from ..meta.data_types import (
    DATA_TYPE_DATETIME,
    DATA_TYPE_ENUM,
    DATA_TYPE_FLOAT,
    DATA_TYPE_INT,
    DATA_TYPE_JSON,
    DATA_TYPE_STRING,
    DataTypeGetter,
    LogicalTypeRegistry,
)
from ..meta.models import Enum, EnumValue, Field, Table
from .comment_parser import DEFAULT_MATCHERS, EnumPairMatcher, extract_enum_from_comment, mentions_json

logger = logging.getLogger(__name__)

DEFAULT_DIALECT = "mysql"
# Sharding annotations the parser doesn't understand
DEFAULT_STRIP_PATTERNS = (r"shardkey=.*",)

INTEGER_SQL_TYPES = frozenset({"tinyint", "smallint", "mediumint", "int", "integer", "bigint"})
DECIMAL_SQL_TYPES = frozenset({"decimal", "dec", "numeric", "fixed", "float", "double", "real"})
DATETIME_SQL_TYPES = frozenset({"date", "datetime", "timestamp", "time", "year"})

_TYPE_PARAMS_RE = re.compile(r"\(.*?\)")


def logical_type_name(sql_type: str) -> str:
    """Map a declared SQL type such as "INT(11)" or "decimal(10,2)" to a logical type name."""
    tokens = _TYPE_PARAMS_RE.sub(" ", sql_type).lower().split()
    base = tokens[0] if tokens else ""

    # UBIGINT, UINT, ... as rendered by some dialects
    if base in INTEGER_SQL_TYPES or (base.startswith("u") and base[1:] in INTEGER_SQL_TYPES):
        return DATA_TYPE_INT
    if base in DECIMAL_SQL_TYPES:
        return DATA_TYPE_FLOAT
    if base in DATETIME_SQL_TYPES:
        return DATA_TYPE_DATETIME
    return DATA_TYPE_STRING


class DDLExtractor:
    """Extracts Table metadata from CREATE TABLE statements."""

    def __init__(
        self,
        data_types: Optional[DataTypeGetter] = None,
        dialect: str = DEFAULT_DIALECT,
        strip_patterns: Iterable[str] = DEFAULT_STRIP_PATTERNS,
        matchers: Iterable[EnumPairMatcher] = DEFAULT_MATCHERS,
    ):
        """
        Args:
            data_types: Logical type registry used for Field.type_id
            dialect: sqlglot dialect to parse with
            strip_patterns: Regexes removed from the DDL before parsing
            matchers: Enum delimiter strategies for column comments
        """
        self.data_types = data_types or LogicalTypeRegistry()
        self.dialect = dialect
        self.strip_patterns = [re.compile(p) for p in strip_patterns]
        self.matchers = tuple(matchers)

    def parse(self, ddl: str) -> exp.Create:
        """Parse DDL text and return its first statement.

        Raises:
            MalformedStatementError: If nothing parses, or the first
                statement is not CREATE TABLE
        """
        for pattern in self.strip_patterns:
            ddl = pattern.sub("", ddl)

        try:
            statements = [s for s in sqlglot.parse(ddl, read=self.dialect) if s is not None]
        except SqlglotError as e:
            raise MalformedStatementError(f"parse ddl fail: {e}") from e

        if not statements:
            raise MalformedStatementError("parse ddl fail, no statement found")
        if len(statements) > 1:
            logger.debug(f"DDL holds {len(statements)} statements, using the first")

        stmt = statements[0]
        if not _is_create_table(stmt):
            raise MalformedStatementError(
                f"parse ddl fail, not a CREATE TABLE statement: {stmt.key.upper()}"
            )
        return stmt

    def extract(self, stmt: exp.Expression) -> Table:
        """Build a Table from a parsed CREATE TABLE statement.

        Raises:
            MalformedStatementError: If stmt is not CREATE TABLE
        """
        if not _is_create_table(stmt):
            raise MalformedStatementError("parse ddl fail, not a CREATE TABLE statement")

        schema = stmt.this
        table_expr = schema.this if isinstance(schema, exp.Schema) else schema
        table = Table(name=table_expr.name, display_name=_table_comment(stmt))

        columns: list[exp.ColumnDef] = []
        pk_fields: set[str] = set()
        if isinstance(schema, exp.Schema):
            columns = [e for e in schema.expressions if isinstance(e, exp.ColumnDef)]
            for pk in schema.find_all(exp.PrimaryKey):
                pk_fields.update(_key_column_name(key) for key in pk.expressions)

        for col in columns:
            field = self._extract_field(col)
            if field.name in pk_fields:
                field.is_primary_key = True
            table.add_field(field)

        logger.debug(f"Extracted table {table.name} with {len(table.fields)} fields")
        return table

    def extract_from_ddl(self, ddl: str) -> Table:
        return self.extract(self.parse(ddl))

    def _extract_field(self, col: exp.ColumnDef) -> Field:
        field = Field(name=col.name)

        kind = col.args.get("kind")
        sql_type = kind.sql(dialect=self.dialect) if kind is not None else ""
        field.type_id = self.data_types.resolve_by_name(logical_type_name(sql_type)).id

        for constraint in col.args.get("constraints") or []:
            option = constraint.args.get("kind") if isinstance(constraint, exp.ColumnConstraint) else constraint

            if isinstance(option, exp.AutoIncrementColumnConstraint):
                field.is_auto_increment = True
            elif isinstance(option, exp.PrimaryKeyColumnConstraint):
                field.is_primary_key = True
            elif isinstance(option, exp.CommentColumnConstraint):
                self._apply_comment(field, _literal_text(option.this))

        if not field.display_name:
            field.display_name = field.name
        return field

    def _apply_comment(self, field: Field, comment: str) -> None:
        name, pairs = extract_enum_from_comment(comment, self.matchers)
        field.display_name = name

        if not pairs:
            string_id = self.data_types.resolve_by_name(DATA_TYPE_STRING).id
            if field.type_id == string_id and mentions_json(comment):
                field.type_id = self.data_types.resolve_by_name(DATA_TYPE_JSON).id
            return

        enum = Enum(display_name=name, value_type_id=field.type_id)
        field_var = to_camel(field.name)
        for literal, description in pairs:
            enum.add_value(EnumValue(
                enum_id=enum.id,
                symbolic_name=field_var + to_camel(literal),
                display_name=description,
                literal=literal,
            ))
        field.type_id = self.data_types.resolve_by_name(DATA_TYPE_ENUM).id
        field.enum = enum


def _is_create_table(stmt: Optional[exp.Expression]) -> bool:
    return isinstance(stmt, exp.Create) and str(stmt.args.get("kind") or "").upper() == "TABLE"


def _table_comment(stmt: exp.Create) -> str:
    properties = stmt.args.get("properties")
    if properties is None:
        return ""
    for prop in properties.expressions:
        if isinstance(prop, exp.SchemaCommentProperty):
            return _literal_text(prop.this)
    return ""


def _key_column_name(key: exp.Expression) -> str:
    if isinstance(key, exp.Ordered):
        key = key.this
    return key.name


def _literal_text(node: Optional[exp.Expression]) -> str:
    if node is None:
        return ""
    if isinstance(node, exp.Literal):
        return node.this
    return node.name or node.sql()
