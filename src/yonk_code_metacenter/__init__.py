"""Schema metadata center: DDL extraction, code generation and search templates."""

__version__ = "0.1.0"
