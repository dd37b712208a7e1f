"""Source artifact generation from Jinja2 templates.

Each GenerateParam names one artifact (e.g. "constants", "model"). For
every table, the artifact is rendered from either a built-in template
or a custom one and written to:

    <output_dir>/<package_name>/<name>.py
"""
from __future__ import annotations

import logging
import re
import subprocess
from pathlib import Path
from typing import Iterable

from jinja2 import (
    Environment,
    FileSystemLoader,
    PackageLoader,
    StrictUndefined,
    Template,
    TemplateError,
    select_autoescape,
)
from pydantic import BaseModel, field_validator
from pydantic import Field as ModelField

from ..errors import ArtifactGenerationError
from ..meta.data_types import DataTypeGetter, HostTypeRegistry
from ..meta.models import Table
from .naming import package_name
from .params import build_template_params

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR = "./default"
TEMPLATE_SUFFIX = ".py.j2"

_WHITESPACE_RE = re.compile(r"\s+")


class GenerateParam(BaseModel):
    """One artifact to generate per table."""

    name: str = ModelField(..., min_length=1, description="Artifact name, also the output module name")
    template_path: Path | None = ModelField(
        None, description="Custom template; defaults to the built-in <name>.py.j2"
    )
    output_dir: str = ModelField(DEFAULT_OUTPUT_DIR, description="Root directory for generated packages")
    inject_params: list[str] = ModelField(
        default_factory=list, description="Free-form strings made available to templates"
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Name must be usable as a file name."""
        v = v.strip()
        if not v or "/" in v or "\\" in v:
            raise ValueError(f"Invalid artifact name: {v!r}")
        return v

    @field_validator("output_dir")
    @classmethod
    def normalize_output_dir(cls, v: str) -> str:
        if not v:
            return DEFAULT_OUTPUT_DIR
        return v.rstrip("/") or "/"


def one_line(text: str) -> str:
    """Collapse whitespace so text fits in a trailing comment."""
    return _WHITESPACE_RE.sub(" ", str(text)).strip()


def make_environment(loader) -> Environment:
    env = Environment(
        loader=loader,
        autoescape=select_autoescape(enabled_extensions=()),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["pyrepr"] = repr
    env.filters["oneline"] = one_line
    return env


class ArtifactGenerator:
    """Renders and writes per-table source artifacts."""

    def __init__(
        self,
        data_types: DataTypeGetter | None = None,
        formatter: list[str] | None = None,
        skip_retired: bool = False,
    ):
        """
        Args:
            data_types: Host type registry (defaults to HostTypeRegistry())
            formatter: Command run on every written file, e.g. ["black", "-q"]
            skip_retired: Leave retired enum values out of generated code
        """
        self.data_types = data_types or HostTypeRegistry()
        self.formatter = list(formatter or [])
        self.skip_retired = skip_retired
        self._builtin_env = make_environment(PackageLoader("yonk_code_metacenter.codegen", "templates"))

    def render(self, table: Table, param: GenerateParam) -> str:
        """Render one artifact for one table without touching the filesystem.

        Raises:
            ArtifactGenerationError: If the template can't be loaded or rendered
        """
        template = self._load_template(param)
        params = build_template_params(
            table, self.data_types, param.inject_params, skip_retired=self.skip_retired
        )

        try:
            return template.render(**vars(params))
        except TemplateError as e:
            raise ArtifactGenerationError(
                f"Failed to render {param.name} for table {table.name}: {e}"
            ) from e

    def generate(self, tables: Iterable[Table], params: Iterable[GenerateParam]) -> list[Path]:
        """Write every artifact for every table.

        The first failure aborts the run; files already written are left in place.

        Returns:
            Paths of the written artifacts
        """
        tables = list(tables)
        written: list[Path] = []
        for param in params:
            for table in tables:
                written.append(self._write(table, param))
        return written

    def output_path(self, table: Table, param: GenerateParam) -> Path:
        return Path(param.output_dir) / package_name(table.name, table.id) / f"{param.name}.py"

    def _write(self, table: Table, param: GenerateParam) -> Path:
        content = self.render(table, param)
        path = self.output_path(table, param)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            (path.parent / "__init__.py").touch(exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise ArtifactGenerationError(f"Failed to write {path}: {e}") from e

        if self.formatter:
            self._format(path)

        logger.info(f"Generated {param.name} for table {table.name}: {path}")
        return path

    def _format(self, path: Path) -> None:
        cmd = [*self.formatter, str(path)]
        try:
            subprocess.run(cmd, capture_output=True, text=True, check=True)
        except FileNotFoundError as e:
            raise ArtifactGenerationError(f"Formatter not found: {self.formatter[0]}") from e
        except subprocess.CalledProcessError as e:
            raise ArtifactGenerationError(
                f"Formatter failed on {path} (exit {e.returncode}): {e.stderr.strip()}"
            ) from e

    def _load_template(self, param: GenerateParam) -> Template:
        try:
            if param.template_path is None:
                return self._builtin_env.get_template(f"{param.name}{TEMPLATE_SUFFIX}")
            env = make_environment(FileSystemLoader(str(param.template_path.parent)))
            return env.get_template(param.template_path.name)
        except TemplateError as e:
            source = param.template_path or f"{param.name}{TEMPLATE_SUFFIX}"
            raise ArtifactGenerationError(f"Failed to load template {source}: {e}") from e
