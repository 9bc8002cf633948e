"""
Command-line front end for opsml-cli.

Commands:
- list-cards: list cards from a registry
- download-model-metadata: save model metadata as JSON
- download-model: download model files and optional preprocessor
- get-model-metrics: show metrics recorded for a run
- version / info

The tracking server is taken from --tracking-uri or OPSML_TRACKING_URI.
"""

from .cli import main, parse_args
from .errors import ConfigurationError

__all__ = [
    "main",
    "parse_args",
    "ConfigurationError",
]
