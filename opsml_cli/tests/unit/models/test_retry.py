"""Unit tests for FileDownloader retry behavior."""

from __future__ import annotations

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from opsml_cli.client import (
    AuthorizationDeniedError,
    ClientConnectionError,
    TransferAuthorization,
    TransferFailedError,
)
from opsml_cli.models import (
    DownloadCancelledError,
    DownloadExhaustedError,
    FileDownloader,
    LocalIOError,
    RetryConfig,
)

SIGNED = TransferAuthorization(url="https://storage.example.com/signed")


def _denied() -> AuthorizationDeniedError:
    return AuthorizationDeniedError("Request failed: 403 - denied", 403, "denied")


class TestSuccess:
    """Tests for successful downloads."""

    async def test_first_attempt_success(
        self, file_downloader: FileDownloader, mock_client: MagicMock, tmp_path: Path
    ) -> None:
        local_path = tmp_path / "model.bin"

        await file_downloader.download("root/model.bin", local_path)

        assert local_path.read_bytes() == b"test"
        mock_client.authorize.assert_awaited_once_with("root/model.bin")
        assert mock_client.stream_to_file.await_count == 1

    async def test_streams_into_partial_file(
        self, file_downloader: FileDownloader, mock_client: MagicMock, tmp_path: Path
    ) -> None:
        """Bytes land in a hidden .part file beside the target, renamed on success."""
        local_path = tmp_path / "model.bin"

        await file_downloader.download("root/model.bin", local_path)

        streamed_to = mock_client.stream_to_file.await_args.args[1]
        assert streamed_to.parent == tmp_path
        assert streamed_to.name.startswith(".model.bin.")
        assert streamed_to.name.endswith(".part")
        assert not streamed_to.exists()
        assert local_path.exists()

    async def test_overwrites_existing_file(
        self, file_downloader: FileDownloader, tmp_path: Path
    ) -> None:
        local_path = tmp_path / "model.bin"
        local_path.write_bytes(b"stale content from previous run")

        await file_downloader.download("root/model.bin", local_path)

        assert local_path.read_bytes() == b"test"


class TestRetryLogic:
    """Tests for the bounded retry loop."""

    async def test_succeeds_on_third_authorization(
        self, file_downloader: FileDownloader, mock_client: MagicMock, tmp_path: Path
    ) -> None:
        """Two denied authorizations then success: 3 authorize calls, 1 fetch."""
        mock_client.authorize.side_effect = [_denied(), _denied(), SIGNED]
        local_path = tmp_path / "model.bin"

        await file_downloader.download("root/model.bin", local_path)

        assert mock_client.authorize.await_count == 3
        assert mock_client.stream_to_file.await_count == 1
        assert local_path.read_bytes() == b"test"

    async def test_exhausted_after_three_denials(
        self, file_downloader: FileDownloader, mock_client: MagicMock, tmp_path: Path
    ) -> None:
        mock_client.authorize.side_effect = _denied()

        with pytest.raises(DownloadExhaustedError, match="after 3 attempts") as exc_info:
            await file_downloader.download("root/model.bin", tmp_path / "model.bin")

        assert exc_info.value.max_attempts == 3
        assert isinstance(exc_info.value.__cause__, AuthorizationDeniedError)
        assert mock_client.authorize.await_count == 3
        assert mock_client.stream_to_file.await_count == 0

    async def test_exhausted_after_three_transfer_failures(
        self, file_downloader: FileDownloader, mock_client: MagicMock, tmp_path: Path
    ) -> None:
        """Each attempt requests a fresh authorization before fetching."""
        mock_client.stream_to_file.side_effect = TransferFailedError("connection reset")
        local_path = tmp_path / "model.bin"

        with pytest.raises(DownloadExhaustedError):
            await file_downloader.download("root/model.bin", local_path)

        assert mock_client.authorize.await_count == 3
        assert mock_client.stream_to_file.await_count == 3
        assert not local_path.exists()

    async def test_mixed_failures_then_success(
        self, file_downloader: FileDownloader, mock_client: MagicMock, tmp_path: Path
    ) -> None:
        original_stream = mock_client.stream_to_file.side_effect
        calls = 0

        async def flaky_stream(authorization, local_path):
            nonlocal calls
            calls += 1
            if calls == 1:
                local_path.write_bytes(b"te")
                raise TransferFailedError("connection reset")
            return await original_stream(authorization, local_path)

        mock_client.authorize.side_effect = [
            ClientConnectionError("Connection error"),
            SIGNED,
            SIGNED,
        ]
        mock_client.stream_to_file.side_effect = flaky_stream
        local_path = tmp_path / "model.bin"

        await file_downloader.download("root/model.bin", local_path)

        assert mock_client.authorize.await_count == 3
        assert calls == 2
        assert local_path.read_bytes() == b"test"

    async def test_partial_file_removed_after_failed_attempt(
        self, file_downloader: FileDownloader, mock_client: MagicMock, tmp_path: Path
    ) -> None:
        async def truncated_stream(authorization, local_path):
            local_path.write_bytes(b"te")
            raise TransferFailedError("connection reset")

        mock_client.stream_to_file.side_effect = truncated_stream
        local_path = tmp_path / "model.bin"

        with pytest.raises(DownloadExhaustedError):
            await file_downloader.download("root/model.bin", local_path)

        assert list(tmp_path.iterdir()) == []

    async def test_no_delay_after_final_attempt(
        self, mock_client: MagicMock, tmp_path: Path
    ) -> None:
        """Delay is only inserted between attempts."""
        sleep = AsyncMock()
        downloader = FileDownloader(
            mock_client,
            RetryConfig(max_attempts=3, retry_delay_seconds=2.5),
            sleep=sleep,
        )
        mock_client.authorize.side_effect = _denied()

        with pytest.raises(DownloadExhaustedError):
            await downloader.download("root/model.bin", tmp_path / "model.bin")

        assert [c.args[0] for c in sleep.await_args_list] == [2.5, 2.5]

    async def test_no_delay_after_success(
        self, mock_client: MagicMock, tmp_path: Path
    ) -> None:
        sleep = AsyncMock()
        downloader = FileDownloader(
            mock_client, RetryConfig(retry_delay_seconds=2.5), sleep=sleep
        )

        await downloader.download("root/model.bin", tmp_path / "model.bin")

        sleep.assert_not_awaited()

    async def test_logs_each_failed_attempt(
        self,
        file_downloader: FileDownloader,
        mock_client: MagicMock,
        tmp_path: Path,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        mock_client.authorize.side_effect = _denied()

        with caplog.at_level("WARNING", logger="opsml_cli.models.retry"):
            with pytest.raises(DownloadExhaustedError):
                await file_downloader.download("root/model.bin", tmp_path / "model.bin")

        messages = [r.getMessage() for r in caplog.records]
        for attempt in (1, 2, 3):
            assert any(f"Download attempt {attempt}/3 failed" in m for m in messages)

    async def test_non_retryable_error_propagates_immediately(
        self, file_downloader: FileDownloader, mock_client: MagicMock, tmp_path: Path
    ) -> None:
        mock_client.authorize.side_effect = RuntimeError("bug")

        with pytest.raises(RuntimeError, match="bug"):
            await file_downloader.download("root/model.bin", tmp_path / "model.bin")

        assert mock_client.authorize.await_count == 1


class TestCancellation:
    """Tests for the cancellation signal."""

    async def test_cancelled_before_first_attempt(
        self, mock_client: MagicMock, tmp_path: Path
    ) -> None:
        cancel_event = asyncio.Event()
        cancel_event.set()
        downloader = FileDownloader(
            mock_client, RetryConfig(retry_delay_seconds=0), cancel_event=cancel_event
        )

        with pytest.raises(DownloadCancelledError):
            await downloader.download("root/model.bin", tmp_path / "model.bin")

        mock_client.authorize.assert_not_awaited()

    async def test_cancelled_between_attempts(
        self, mock_client: MagicMock, tmp_path: Path
    ) -> None:
        cancel_event = asyncio.Event()

        async def cancel_on_sleep(seconds: float) -> None:
            cancel_event.set()

        downloader = FileDownloader(
            mock_client,
            RetryConfig(max_attempts=3, retry_delay_seconds=1),
            sleep=cancel_on_sleep,
            cancel_event=cancel_event,
        )
        mock_client.authorize.side_effect = _denied()

        with pytest.raises(DownloadCancelledError):
            await downloader.download("root/model.bin", tmp_path / "model.bin")

        assert mock_client.authorize.await_count == 1


class TestFinalize:
    """Tests for moving the completed file into place."""

    async def test_rename_failure_raises_local_io_error(
        self, file_downloader: FileDownloader, tmp_path: Path
    ) -> None:
        # A directory at the destination makes the rename fail
        local_path = tmp_path / "model.bin"
        local_path.mkdir()
        (local_path / "keep").write_text("x")

        with pytest.raises(LocalIOError):
            await file_downloader.download("root/model.bin", local_path)

        assert [p.name for p in tmp_path.iterdir()] == ["model.bin"]

    async def test_missing_parent_raises_local_io_error(
        self, file_downloader: FileDownloader, mock_client: MagicMock, tmp_path: Path
    ) -> None:
        """A local failure is not retried."""
        with pytest.raises(LocalIOError, match="temp file"):
            await file_downloader.download(
                "root/model.bin", tmp_path / "missing" / "model.bin"
            )

        assert mock_client.authorize.await_count == 1
        mock_client.stream_to_file.assert_not_awaited()

    async def test_existing_part_file_is_not_touched(
        self, file_downloader: FileDownloader, tmp_path: Path
    ) -> None:
        sibling = tmp_path / "model.bin.part"
        sibling.write_bytes(b"a real file named like a partial download")

        await file_downloader.download("root/model.bin", tmp_path / "model.bin")

        assert sibling.read_bytes() == b"a real file named like a partial download"
        assert (tmp_path / "model.bin").read_bytes() == b"test"
