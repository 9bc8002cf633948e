"""
opsml-cli - Interact with an OpsML tracking server.

Usage:
    opsml-cli list-cards --registry model
    opsml-cli download-model-metadata --name model --repository repo --version 1.0.0
    opsml-cli download-model --uid abc123 --onnx --preprocessor
    opsml-cli get-model-metrics --uid abc123
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Awaitable, Callable
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape

from .. import __version__
from ..cards import CardLister, InvalidRegistryError, ListCardsRequest, construct_tags
from ..client import OpsmlClient
from ..errors import OpsmlCLIError
from ..metrics import MetricGetter
from ..models import (
    DownloadFlags,
    FileDownloader,
    InvalidReferenceError,
    ModelReference,
    download_model,
    download_model_metadata,
)
from .config import (
    add_args,
    build_client_config,
    build_retry_config,
    check_config,
    config_to_dict,
    setup_logging,
)
from .errors import ConfigurationError
from .tables import card_table, metric_table

logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)

LOGO_TEXT = """
 ██████  ██████  ███████ ███    ███ ██             ██████ ██      ██
██    ██ ██   ██ ██      ████  ████ ██            ██      ██      ██
██    ██ ██████  ███████ ██ ████ ██ ██      █████ ██      ██      ██
██    ██ ██           ██ ██  ██  ██ ██            ██      ██      ██
 ██████  ██      ███████ ██      ██ ███████        ██████ ███████ ██
"""

# Usage errors exit with 2, everything else with 1
USAGE_ERRORS = (ConfigurationError, InvalidReferenceError, InvalidRegistryError)


def _reference_from_args(args: argparse.Namespace) -> ModelReference:
    return ModelReference(
        name=args.name,
        repository=args.repository,
        version=args.version,
        uid=args.uid,
    )


def _describe(args: argparse.Namespace) -> str:
    return args.uid if args.uid is not None else str(args.name)


async def cmd_list_cards(args: argparse.Namespace, client: OpsmlClient) -> int:
    """Execute the list-cards command."""
    request = ListCardsRequest(
        registry_type=args.registry,
        name=args.name,
        repository=args.repository,
        version=args.version,
        uid=args.uid,
        limit=args.limit,
        tags=construct_tags(args.tag_name, args.tag_value),
        max_date=args.max_date,
        ignore_release_candidates=args.ignore_release_candidates,
    )

    cards = await CardLister(client).list_cards(request)

    console.print(
        f"\nListing cards from [bold green]{escape(args.registry)}[/bold green] registry"
    )
    console.print(card_table(cards))
    return 0


async def cmd_download_model_metadata(
    args: argparse.Namespace, client: OpsmlClient
) -> int:
    """Execute the download-model-metadata command."""
    reference = _reference_from_args(args)

    metadata = await download_model_metadata(
        client,
        reference,
        write_dir=args.write_dir,
        ignore_release_candidates=args.ignore_release_candidates,
    )

    console.print(
        f"[green]✓[/green] Saved metadata for [cyan]{escape(metadata.model_name)}[/cyan] "
        f"v{escape(metadata.model_version)} to {escape(str(Path(args.write_dir)))}"
    )
    return 0


async def cmd_download_model(args: argparse.Namespace, client: OpsmlClient) -> int:
    """Execute the download-model command."""
    reference = _reference_from_args(args)

    def on_file(local_path: Path, remote_path: str) -> None:
        console.print(
            f"Downloading: [green]{escape(str(local_path))}[/green] "
            f"from {escape(remote_path)}"
        )

    result = await download_model(
        client,
        reference,
        write_dir=args.write_dir,
        flags=DownloadFlags(
            onnx=args.onnx,
            quantize=args.quantize,
            preprocessor=args.preprocessor,
        ),
        ignore_release_candidates=args.ignore_release_candidates,
        file_downloader=FileDownloader(client, build_retry_config(args)),
        on_file=on_file,
    )

    console.print(
        f"[green]✓[/green] Downloaded {len(result.files)} files for "
        f"[cyan]{escape(result.metadata.model_name)}[/cyan] "
        f"v{escape(result.metadata.model_version)}"
    )
    return 0


async def cmd_get_model_metrics(args: argparse.Namespace, client: OpsmlClient) -> int:
    """Execute the get-model-metrics command."""
    metrics = await MetricGetter(client).get_model_metrics(args.uid)

    console.print("\nModel Metrics")
    console.print(metric_table(metrics))
    return 0


def cmd_version(args: argparse.Namespace) -> int:
    """Execute the version command."""
    console.print(f"opsml-cli version [bold green]{__version__}[/bold green]")
    return 0


def cmd_info(args: argparse.Namespace) -> int:
    """Execute the info command."""
    console.print(f"[green]{LOGO_TEXT}[/green]", highlight=False)
    console.print(f"opsml-cli version [bold magenta]{__version__}[/bold magenta]")
    console.print("2023 Shipt, Inc.\n")
    return 0


ServerCommand = Callable[[argparse.Namespace, OpsmlClient], Awaitable[int]]

SERVER_COMMANDS: dict[str, tuple[ServerCommand, Callable[[argparse.Namespace], str]]] = {
    "list-cards": (cmd_list_cards, lambda a: "Failed to list cards"),
    "download-model-metadata": (
        cmd_download_model_metadata,
        lambda a: f"Failed to download model metadata for {_describe(a)}",
    ),
    "download-model": (
        cmd_download_model,
        lambda a: f"Failed to download model for {_describe(a)}",
    ),
    "get-model-metrics": (
        cmd_get_model_metrics,
        lambda a: f"Failed to get model metrics for {a.uid}",
    ),
}

LOCAL_COMMANDS: dict[str, Callable[[argparse.Namespace], int]] = {
    "version": cmd_version,
    "info": cmd_info,
}


def _comma_list(value: str) -> list[str]:
    return [item for item in value.split(",") if item]


def _add_reference_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--name", default=None, help="Name given to the card")
    parser.add_argument("--repository", default=None, help="Card repository")
    parser.add_argument("--version", default=None, help="Card version")
    parser.add_argument("--uid", default=None, help="Card uid")


def _add_release_candidate_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--ignore_release_candidate",
        dest="ignore_release_candidates",
        action="store_true",
        help="Ignore release candidate versions",
    )


def _add_write_dir_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--write-dir",
        dest="write_dir",
        default="models",
        metavar="PATH",
        help="Directory to write to (default: models)",
    )


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="opsml-cli",
        description="CLI tool for interacting with an OpsML server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    add_args(parser)

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        help="Command to execute",
    )

    # ─────────────────────────────────────────────────────────────────────────
    # LIST-CARDS command
    # ─────────────────────────────────────────────────────────────────────────
    list_parser = subparsers.add_parser(
        "list-cards",
        help="List cards from a registry",
        description="List cards from a registry (data, model, run, pipeline, audit, project).",
    )
    list_parser.add_argument(
        "--registry",
        required=True,
        help="Name of the registry (data, model, run, etc)",
    )
    _add_reference_args(list_parser)
    list_parser.add_argument("--limit", type=int, default=None, help="Card limit")
    list_parser.add_argument(
        "--tag_name",
        type=_comma_list,
        default=None,
        metavar="NAME[,NAME...]",
        help="Comma separated tag names",
    )
    list_parser.add_argument(
        "--tag_value",
        type=_comma_list,
        default=None,
        metavar="VALUE[,VALUE...]",
        help="Comma separated tag values, paired with --tag_name",
    )
    list_parser.add_argument("--max_date", default=None, help="Max date")
    _add_release_candidate_arg(list_parser)

    # ─────────────────────────────────────────────────────────────────────────
    # DOWNLOAD-MODEL-METADATA command
    # ─────────────────────────────────────────────────────────────────────────
    metadata_parser = subparsers.add_parser(
        "download-model-metadata",
        help="Download model metadata from the model registry",
        description="Download model metadata and save it as model-metadata.json.",
    )
    _add_reference_args(metadata_parser)
    _add_write_dir_arg(metadata_parser)
    _add_release_candidate_arg(metadata_parser)

    # ─────────────────────────────────────────────────────────────────────────
    # DOWNLOAD-MODEL command
    # ─────────────────────────────────────────────────────────────────────────
    model_parser = subparsers.add_parser(
        "download-model",
        help="Download a model and its metadata from the model registry",
        description="Download model files, and optionally its preprocessor.",
    )
    _add_reference_args(model_parser)
    _add_write_dir_arg(model_parser)
    model_parser.add_argument(
        "--onnx",
        action="store_true",
        help="Download the onnx model instead of the trained model",
    )
    model_parser.add_argument(
        "--quantize",
        action="store_true",
        help="With --onnx, download the quantized model (huggingface only)",
    )
    model_parser.add_argument(
        "--preprocessor",
        action="store_true",
        help="Also download the preprocessor, tokenizer or feature extractor",
    )
    _add_release_candidate_arg(model_parser)

    # ─────────────────────────────────────────────────────────────────────────
    # GET-MODEL-METRICS command
    # ─────────────────────────────────────────────────────────────────────────
    metrics_parser = subparsers.add_parser(
        "get-model-metrics",
        help="Retrieve model metrics",
    )
    metrics_parser.add_argument("--uid", required=True, help="Card uid")

    subparsers.add_parser("version", help="Show opsml-cli version")
    subparsers.add_parser("info", help="Show opsml-cli info")

    return parser.parse_args(args)


def main(args: list[str] | None = None) -> int:
    """CLI entry point."""
    # .env must be loaded before parsing, option defaults read the environment
    load_dotenv()
    config = parse_args(args)
    setup_logging(config.log_level)

    if config.command in LOCAL_COMMANDS:
        return LOCAL_COMMANDS[config.command](config)

    command, context = SERVER_COMMANDS[config.command]

    try:
        check_config(config)
        logger.debug(f"Configuration: {config_to_dict(config)}")
        client = OpsmlClient(build_client_config(config))
        return asyncio.run(command(config, client))

    except USAGE_ERRORS as e:
        err_console.print(f"[bold red]ERROR:[/bold red] {escape(str(e))}")
        return 2
    except OpsmlCLIError as e:
        err_console.print(
            f"[bold red]ERROR:[/bold red] {escape(context(config))}: {escape(str(e))}"
        )
        return 1
    except KeyboardInterrupt:
        err_console.print("\nInterrupted")
        return 130
    except Exception as e:
        err_console.print(f"[bold red]ERROR:[/bold red] Unexpected error: {escape(str(e))}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
