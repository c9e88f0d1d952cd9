"""Core building blocks: errors, diagnostics, node addressing and metrics."""

from .diagnostics import ErrorCollector, ProcessingError, Severity
from .errors import (
    ConceptForgeError,
    ConfigError,
    ErrorContext,
    ExtensionError,
    FileOutputError,
    RenderError,
    TemplateValidationError,
)
from .metrics import PerformanceMetrics, PerformanceTracker
from .node_ids import ROOT_NODE_ID, generate_node_id, is_valid_node_id, parse_node_id

__all__ = [
    "ConceptForgeError",
    "ConfigError",
    "ErrorCollector",
    "ErrorContext",
    "ExtensionError",
    "FileOutputError",
    "PerformanceMetrics",
    "PerformanceTracker",
    "ProcessingError",
    "ROOT_NODE_ID",
    "RenderError",
    "Severity",
    "TemplateValidationError",
    "generate_node_id",
    "is_valid_node_id",
    "parse_node_id",
]
