"""
Error types for conceptforge.

Data-driven problems (malformed template nodes, style smells, merge conflicts)
never raise; they are recorded as diagnostics. The exceptions below cover
programmer and configuration mistakes, plus I/O failures in collaborators.
"""

from dataclasses import dataclass, field
from typing import Any


class ConceptForgeError(Exception):
    """Base exception for all conceptforge errors."""

    def __init__(self, message: str, context: "ErrorContext | None" = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class TemplateValidationError(ConceptForgeError):
    """
    Raised when template input cannot be turned into template nodes at all.

    Examples:
    - Top-level input is neither a list nor a ``{template: [...]}`` object
    - Template file is not valid JSON
    """

    pass


class ExtensionError(ConceptForgeError):
    """
    Raised when an extension is misused through the engine facade.

    Examples:
    - Registering an extension whose metadata fails validation
    - Selecting a default framework that was never registered
    """

    pass


class FileOutputError(ConceptForgeError):
    """Raised when generated output cannot be written to disk."""

    pass


class RenderError(ConceptForgeError):
    """
    Raised when a backend is asked to render something it cannot express.

    Examples:
    - Unknown target language
    - Rendering without a framework backend through ``render_strict``
    """

    pass


class ConfigError(ConceptForgeError):
    """Raised when a scaffold configuration file cannot be loaded or is invalid."""

    pass


@dataclass
class ErrorContext:
    """
    Where an error happened.

    Attributes:
        node_id: Tree address of the offending node, when known
        extension: Key of the extension involved, when known
        details: Extra key/value information for the message
    """

    node_id: str | None = None
    extension: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    def format(self) -> str:
        """Format as e.g. ``at root.children[0] [react] (key=value)``."""
        parts = []
        if self.node_id:
            parts.append(f"at {self.node_id}")
        if self.extension:
            parts.append(f"[{self.extension}]")
        if self.details:
            rendered = ", ".join(f"{k}={v}" for k, v in self.details.items())
            parts.append(f"({rendered})")
        return " ".join(parts)


def make_extension_error(message: str, extension: str | None = None) -> ExtensionError:
    """
    Helper to create an ExtensionError with optional extension context.

    Args:
        message: Error description
        extension: Optional extension key

    Returns:
        ExtensionError with context attached when an extension key is given
    """
    if extension:
        return ExtensionError(message, ErrorContext(extension=extension))
    return ExtensionError(message)
