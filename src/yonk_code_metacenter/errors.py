"""Exceptions raised by the metadata center."""
from __future__ import annotations


class MetaCenterError(Exception):
    pass


class MalformedStatementError(MetaCenterError):
    """DDL text produced no statement, or its first statement is not CREATE TABLE."""


class ArtifactGenerationError(MetaCenterError):
    """A template could not be loaded or rendered, or its output could not be written or formatted."""
