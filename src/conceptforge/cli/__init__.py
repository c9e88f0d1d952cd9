"""conceptforge CLI package."""

from .app import app, build_engine, main
from .logger import CliLogger, get_logger

__all__ = ["CliLogger", "app", "build_engine", "get_logger", "main"]
