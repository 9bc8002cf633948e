"""
CLI configuration management.

Options fall back to environment variables (a .env file in the working
directory is loaded first), then to defaults.
"""

from __future__ import annotations

import argparse
import logging
import os
from typing import Any

from ..client.models import ClientConfig
from ..models.retry import RetryConfig
from .errors import ConfigurationError


def add_args(parser: argparse.ArgumentParser) -> None:
    """
    Add global options to the parser.

    Arguments can be overridden by environment variables.
    """
    parser.add_argument(
        "--tracking-uri",
        dest="tracking_uri",
        type=str,
        metavar="URL",
        help="Base URL of the OpsML tracking server.",
        default=os.environ.get("OPSML_TRACKING_URI", ""),
    )

    parser.add_argument(
        "--timeout",
        type=float,
        metavar="SECONDS",
        help="Timeout for each HTTP request (default: 60).",
        default=float(os.environ.get("OPSML_TIMEOUT", "60")),
    )

    parser.add_argument(
        "--max-attempts",
        dest="max_attempts",
        type=int,
        metavar="N",
        help="Download attempts per file before giving up (default: 3).",
        default=int(os.environ.get("OPSML_MAX_ATTEMPTS", "3")),
    )

    parser.add_argument(
        "--retry-delay",
        dest="retry_delay",
        type=float,
        metavar="SECONDS",
        help="Delay between download attempts (default: 1).",
        default=float(os.environ.get("OPSML_RETRY_DELAY", "1")),
    )

    parser.add_argument(
        "--log_level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level.",
        default=os.environ.get("LOG_LEVEL", "WARNING"),
    )


def check_config(config: argparse.Namespace) -> None:
    """
    Validate configuration.

    Raises:
        ConfigurationError: If configuration is invalid.
    """
    if not config.tracking_uri:
        raise ConfigurationError(
            "No tracking URI found. Pass --tracking-uri or set OPSML_TRACKING_URI"
        )

    if config.timeout <= 0:
        raise ConfigurationError("--timeout must be positive")

    if config.max_attempts < 1:
        raise ConfigurationError("--max-attempts must be at least 1")

    if config.retry_delay < 0:
        raise ConfigurationError("--retry-delay must not be negative")


def build_client_config(config: argparse.Namespace) -> ClientConfig:
    """Build the HTTP client configuration from parsed arguments."""
    return ClientConfig(
        tracking_uri=config.tracking_uri.rstrip("/"),
        timeout=config.timeout,
    )


def build_retry_config(config: argparse.Namespace) -> RetryConfig:
    """Build the download retry configuration from parsed arguments."""
    return RetryConfig(
        max_attempts=config.max_attempts,
        retry_delay_seconds=config.retry_delay,
    )


def config_to_dict(config: argparse.Namespace) -> dict[str, Any]:
    """Convert global config to dictionary for logging."""
    return {
        "tracking_uri": config.tracking_uri,
        "timeout": config.timeout,
        "max_attempts": config.max_attempts,
        "retry_delay": config.retry_delay,
        "log_level": config.log_level,
    }


def setup_logging(level: str) -> None:
    """Configure logging."""
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
