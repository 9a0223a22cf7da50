"""schemasnap - canonical schema extraction for MySQL."""

__version__ = "0.1.0"
