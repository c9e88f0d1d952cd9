"""Stage orchestration from template tree to rendered component."""

from .assembly import AssemblyResult, AssemblyStage
from .processing import (
    ExtractionOptions,
    ProcessingMetadata,
    ProcessingOptions,
    ProcessingPipeline,
    ProcessingResult,
)

__all__ = [
    "AssemblyResult",
    "AssemblyStage",
    "ExtractionOptions",
    "ProcessingMetadata",
    "ProcessingOptions",
    "ProcessingPipeline",
    "ProcessingResult",
]
