"""
File-system collaborators: reading template files and writing generated output.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from conceptforge.core.errors import ErrorContext, FileOutputError, TemplateValidationError
from conceptforge.extensions.base import HookChain, RenderContext

logger = logging.getLogger(__name__)


def load_template(path: Path) -> list[Any] | dict[str, Any]:
    """Load a template (node list or ``{template, component}`` wrapper) from a JSON file.

    Raises:
        TemplateValidationError: If the file is missing, not JSON, or has the wrong shape.
    """
    if not path.exists():
        raise TemplateValidationError(f"Template not found: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise TemplateValidationError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, (list, dict)):
        raise TemplateValidationError(
            f"Template file {path} must contain a list of nodes or an object"
        )
    return data


def write_output(content: str, filename: str, output_dir: Path) -> Path:
    """Write generated source to ``output_dir/filename``, creating the directory.

    Returns:
        Path of the written file.

    Raises:
        FileOutputError: If the directory or file cannot be written.
    """
    path = output_dir / filename
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise FileOutputError(
            f"Could not write {path}: {e}", ErrorContext(details={"path": str(path)})
        ) from e
    logger.info("Wrote %s (%d bytes)", path, len(content.encode("utf-8")))
    return path


def write_component(
    content: str,
    filename: str,
    output_dir: Path,
    hooks: HookChain | None = None,
    context: RenderContext | None = None,
) -> Path:
    """Apply ``on_output_write`` hooks, then write the file."""
    if hooks is not None and context is not None:
        content = hooks.on_output_write(content, context)
    return write_output(content, filename, output_dir)


def component_filename(name: str, framework: str | None, typescript: bool = False) -> str:
    """Default output file name for a component, e.g. ``Button.tsx``."""
    if framework == "react":
        return f"{name}.tsx" if typescript else f"{name}.jsx"
    if framework in ("vue", "svelte"):
        return f"{name}.{framework}"
    return f"{name}.ts" if typescript else f"{name}.js"
