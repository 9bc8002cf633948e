"""Model metadata and artifact download from the tracking server."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from ..client.errors import MalformedResponseError
from .errors import LocalIOError
from .models import (
    DownloadFlags,
    DownloadResult,
    ModelMetadata,
    ModelReference,
)
from .planner import local_path_for, plan_download
from .retry import FileDownloader

if TYPE_CHECKING:
    from ..client.client import OpsmlClient

logger = logging.getLogger(__name__)

MODEL_METADATA_FILE = "model-metadata.json"

# Called with (local_path, remote_path) before each file is fetched
FileCallback = Callable[[Path, str], None]


class ModelDownloader:
    """
    Resolve a model reference and download its files.

    Sequence for a model download:
    1. Fetch metadata (and persist it to {write_dir}/model-metadata.json)
    2. Plan remote root, model uri and optional preprocessor uri
    3. If requested, list and download preprocessor files
    4. List and download model files

    Files are fetched one at a time, each through FileDownloader's retry
    loop. Files written before a failure are left on disk.
    """

    def __init__(
        self,
        client: OpsmlClient,
        file_downloader: FileDownloader,
        write_dir: Path | str,
        on_file: FileCallback | None = None,
    ):
        """
        Initialize model downloader.

        Args:
            client: Tracking server client
            file_downloader: Retrying single-file downloader
            write_dir: Local directory for metadata and artifacts
            on_file: Optional progress callback, called before each file
        """
        self._client = client
        self._file_downloader = file_downloader
        self._write_dir = Path(write_dir)
        self._on_file = on_file

    @property
    def metadata_path(self) -> Path:
        return self._write_dir / MODEL_METADATA_FILE

    async def get_metadata(
        self,
        reference: ModelReference,
        ignore_release_candidates: bool = False,
    ) -> ModelMetadata:
        """
        Fetch model metadata and save a copy to the write directory.

        Args:
            reference: Validated model reference
            ignore_release_candidates: Skip release candidate versions

        Returns:
            ModelMetadata

        Raises:
            ServerRejectedError: If the server rejects the reference
            MalformedResponseError: If the metadata cannot be parsed
            LocalIOError: If the metadata file cannot be written
        """
        logger.info(f"Fetching metadata for model {reference}")

        data = await self._client.get_model_metadata(
            reference.to_request(ignore_release_candidates)
        )

        try:
            metadata = ModelMetadata.from_dict(data)
        except (KeyError, TypeError, AttributeError) as e:
            raise MalformedResponseError(f"Failed to parse model metadata: {e}") from e

        self._save_metadata(metadata)
        return metadata

    def _save_metadata(self, metadata: ModelMetadata) -> None:
        """Write metadata as JSON, overwriting any previous copy."""
        path = self.metadata_path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                json.dump(metadata.to_dict(), f)
        except OSError as e:
            raise LocalIOError(f"Unable to write metadata file {path}: {e}") from e

        logger.info(f"Saved model metadata to {path}")

    async def download_files(self, remote_path: str, remote_root: str) -> list[Path]:
        """
        Download every file listed under remote_path.

        Local paths mirror the remote layout relative to remote_root.

        Args:
            remote_path: Remote file or directory to list
            remote_root: Prefix stripped from each remote file

        Returns:
            Local paths written, in listing order

        Raises:
            ListingError: If the remote path cannot be listed
            RemotePathError: If a listed file is outside remote_root
            DownloadExhaustedError: If a file fails on every attempt
            LocalIOError: If a local directory cannot be created
        """
        remote_files = await self._client.list_files(remote_path)
        logger.info(f"Found {len(remote_files)} files under {remote_path}")

        written: list[Path] = []
        for remote_file in remote_files:
            local_path = local_path_for(remote_file, remote_root, self._write_dir)

            if self._on_file is not None:
                self._on_file(local_path, remote_file)

            try:
                local_path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise LocalIOError(
                    f"Failed to create directory path for {local_path}: {e}"
                ) from e

            await self._file_downloader.download(remote_file, local_path)
            written.append(local_path)

        return written

    async def download_model(
        self,
        reference: ModelReference,
        flags: DownloadFlags,
        ignore_release_candidates: bool = False,
    ) -> DownloadResult:
        """
        Download a model and, optionally, its preprocessor.

        Preprocessor files (preprocessor, tokenizer or feature extractor,
        whichever comes first) are downloaded before model files.

        Args:
            reference: Validated model reference
            flags: onnx/quantize/preprocessor selection
            ignore_release_candidates: Skip release candidate versions

        Returns:
            DownloadResult with metadata, plan and written files

        Raises:
            MissingVariantError: If the requested model variant is absent
            ModelError, ClientError: See get_metadata and download_files
        """
        metadata = await self.get_metadata(reference, ignore_release_candidates)
        plan = plan_download(metadata, flags)
        result = DownloadResult(metadata=metadata, plan=plan)

        if plan.preprocessor_uri is not None:
            logger.info(f"Downloading preprocessor from {plan.preprocessor_uri}")
            result.files.extend(
                await self.download_files(plan.preprocessor_uri, plan.remote_root)
            )
        elif flags.preprocessor:
            logger.info("No preprocessor found in model metadata, skipping")

        logger.info(f"Downloading model from {plan.model_uri}")
        result.files.extend(await self.download_files(plan.model_uri, plan.remote_root))

        logger.info(f"Downloaded {len(result.files)} files for model {reference}")
        return result


async def download_model_metadata(
    client: OpsmlClient,
    reference: ModelReference,
    write_dir: Path | str,
    ignore_release_candidates: bool = False,
) -> ModelMetadata:
    """
    Download and persist model metadata.

    Args:
        client: Tracking server client
        reference: Validated model reference
        write_dir: Directory receiving model-metadata.json
        ignore_release_candidates: Skip release candidate versions

    Returns:
        ModelMetadata
    """
    downloader = ModelDownloader(
        client=client,
        file_downloader=FileDownloader(client),
        write_dir=write_dir,
    )
    return await downloader.get_metadata(reference, ignore_release_candidates)


async def download_model(
    client: OpsmlClient,
    reference: ModelReference,
    write_dir: Path | str,
    flags: DownloadFlags | None = None,
    ignore_release_candidates: bool = False,
    file_downloader: FileDownloader | None = None,
    on_file: FileCallback | None = None,
) -> DownloadResult:
    """
    Download model metadata, artifacts and optional preprocessor files.

    Args:
        client: Tracking server client
        reference: Validated model reference
        write_dir: Local directory for metadata and artifacts
        flags: onnx/quantize/preprocessor selection (defaults to trained model only)
        ignore_release_candidates: Skip release candidate versions
        file_downloader: Retrying single-file downloader (defaults to 3 attempts)
        on_file: Optional progress callback, called before each file

    Returns:
        DownloadResult
    """
    downloader = ModelDownloader(
        client=client,
        file_downloader=file_downloader or FileDownloader(client),
        write_dir=write_dir,
        on_file=on_file,
    )
    return await downloader.download_model(
        reference, flags or DownloadFlags(), ignore_release_candidates
    )
