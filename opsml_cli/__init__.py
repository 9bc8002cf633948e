"""Command-line client for an OpsML tracking server."""

__version__ = "0.5.2"
