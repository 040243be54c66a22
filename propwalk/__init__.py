"""propwalk: interactive schema walker for component code generation."""

__version__ = "0.1.0"
