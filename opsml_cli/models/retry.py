"""Per-file download with bounded retry."""

from __future__ import annotations

import asyncio
import logging
import os
import tempfile
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from ..client.errors import (
    AuthorizationDeniedError,
    ClientConnectionError,
    MalformedResponseError,
    TransferFailedError,
)
from .errors import DownloadCancelledError, DownloadExhaustedError, LocalIOError

if TYPE_CHECKING:
    from ..client.client import OpsmlClient

logger = logging.getLogger(__name__)

# Failures absorbed by the retry loop; anything else aborts the download
RETRYABLE_ERRORS = (
    AuthorizationDeniedError,
    ClientConnectionError,
    MalformedResponseError,
    TransferFailedError,
)

PARTIAL_SUFFIX = ".part"


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for per-file download retries."""

    max_attempts: int = 3
    retry_delay_seconds: float = 1.0  # fixed delay, only between attempts


class FileDownloader:
    """
    Download one remote file with a bounded number of attempts.

    Each attempt requests a fresh presigned url, then streams it into a
    uniquely named temp file (".<name>.<random>.part") beside the local
    path. The temp file is renamed onto the local path only after a
    complete transfer, so an interrupted download never leaves a truncated
    file at the final location and never overwrites a sibling file.
    """

    def __init__(
        self,
        client: OpsmlClient,
        config: RetryConfig | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        cancel_event: asyncio.Event | None = None,
    ):
        """
        Initialize file downloader.

        Args:
            client: Tracking server client
            config: Retry configuration (defaults to 3 attempts, 1s apart)
            sleep: Async sleep used between attempts
            cancel_event: When set, no further attempt is started
        """
        self._client = client
        self._config = config or RetryConfig()
        self._sleep = sleep
        self._cancel_event = cancel_event

    @property
    def config(self) -> RetryConfig:
        return self._config

    async def download(self, remote_path: str, local_path: Path) -> None:
        """
        Download a remote file to local_path.

        Args:
            remote_path: Remote file path
            local_path: Final local destination (parent must exist)

        Raises:
            DownloadExhaustedError: If every attempt failed
            DownloadCancelledError: If cancelled between attempts
            LocalIOError: If the temp file cannot be created or moved into place
        """
        max_attempts = self._config.max_attempts

        def _log_failure(retry_state: RetryCallState) -> None:
            exc = retry_state.outcome.exception()
            logger.warning(
                f"Download attempt {retry_state.attempt_number}/{max_attempts} "
                f"failed for {remote_path}: {exc}"
            )

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(max_attempts),
                wait=wait_fixed(self._config.retry_delay_seconds),
                retry=retry_if_exception_type(RETRYABLE_ERRORS),
                after=_log_failure,
                sleep=self._sleep,
            ):
                with attempt:
                    self._check_cancelled(remote_path)
                    partial_path = await self._attempt(remote_path, local_path)
        except RetryError as e:
            last_error = e.last_attempt.exception()
            logger.error(
                f"Giving up on {remote_path} after {max_attempts} attempts: {last_error}"
            )
            raise DownloadExhaustedError(
                f"Failed to download file after {max_attempts} attempts: {remote_path}",
                max_attempts=max_attempts,
            ) from last_error

        try:
            partial_path.replace(local_path)
        except OSError as e:
            partial_path.unlink(missing_ok=True)
            raise LocalIOError(f"Failed to move download into {local_path}: {e}") from e

    async def _attempt(self, remote_path: str, local_path: Path) -> Path:
        """Run one authorize + stream cycle and return the completed temp file."""
        authorization = await self._client.authorize(remote_path)
        partial_path = _create_partial_file(local_path)
        try:
            written = await self._client.stream_to_file(authorization, partial_path)
        except BaseException:
            partial_path.unlink(missing_ok=True)
            raise
        logger.debug(f"Fetched {written} bytes for {remote_path}")
        return partial_path

    def _check_cancelled(self, remote_path: str) -> None:
        if self._cancel_event is not None and self._cancel_event.is_set():
            raise DownloadCancelledError(f"Download cancelled: {remote_path}")


def _create_partial_file(local_path: Path) -> Path:
    """Create an empty, uniquely named temp file next to local_path."""
    try:
        fd, name = tempfile.mkstemp(
            dir=local_path.parent,
            prefix=f".{local_path.name}.",
            suffix=PARTIAL_SUFFIX,
        )
    except OSError as e:
        raise LocalIOError(f"Failed to create temp file for {local_path}: {e}") from e
    os.close(fd)
    return Path(name)
