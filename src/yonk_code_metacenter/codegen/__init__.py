"""Source artifact generation."""
from __future__ import annotations

from .generator import ArtifactGenerator, GenerateParam
from .params import GenerationParams, build_template_params

__all__ = [
    "ArtifactGenerator",
    "GenerateParam",
    "GenerationParams",
    "build_template_params",
]
