"""Patient Directory: a read-only patient directory query service."""

__version__ = "1.0.0"
