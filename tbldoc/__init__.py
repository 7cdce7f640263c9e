"""Schema model, configuration, lint rules and documentation coverage for database schemas."""

__version__ = "0.1.0"

__all__ = [
    "config",
    "coverage",
    "lint",
    "model",
    "naming",
    "options",
    "when",
    "wildcard",
]