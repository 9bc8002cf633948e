"""Async HTTP client for the OpsML tracking server."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import httpx

from .errors import (
    AuthorizationDeniedError,
    ClientConnectionError,
    ListingError,
    MalformedResponseError,
    RequestRejectedError,
    ServerRejectedError,
    TransferFailedError,
)
from .models import ClientConfig, OpsmlRoute, TransferAuthorization

logger = logging.getLogger(__name__)


class OpsmlClient:
    """
    Client for the tracking server's REST routes.

    Every call opens a short-lived httpx.AsyncClient. Calls never retry;
    retrying is left to the caller (see models.retry.FileDownloader).
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize client.

        Args:
            config: Client configuration (tracking URI, timeout, chunk size)
            transport: Optional httpx transport, used to stub the server in tests
        """
        self._config = config
        self._transport = transport

    @property
    def config(self) -> ClientConfig:
        return self._config

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._config.timeout,
            transport=self._transport,
        )

    async def _request(
        self,
        method: str,
        url: str,
        rejected_error: type[RequestRejectedError] = ServerRejectedError,
        **kwargs: Any,
    ) -> Any:
        """
        Make a request and decode the JSON response.

        Args:
            method: HTTP method
            url: Absolute request url
            rejected_error: Error type raised on a non-success status
            **kwargs: Additional arguments for httpx request (json, params)

        Returns:
            Decoded JSON body

        Raises:
            ClientConnectionError: If the server cannot be reached
            RequestRejectedError: If the server returns a non-success status
            MalformedResponseError: If the body is not valid JSON
        """
        async with self._client() as client:
            try:
                response = await client.request(method, url, **kwargs)
            except httpx.RequestError as e:
                raise ClientConnectionError(f"Connection error: {e}") from e

        if not response.is_success:
            raise rejected_error(
                f"Request failed: {response.status_code} - {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponseError(f"Invalid JSON response: {e}") from e

    async def get_model_metadata(self, payload: dict[str, Any]) -> dict[str, Any]:
        """
        Fetch model metadata for a model reference.

        Args:
            payload: Request body ({name, repository, version, uid,
                ignore_release_candidates})

        Returns:
            Raw metadata document

        Raises:
            ServerRejectedError: If the server rejects the request
            MalformedResponseError: If the body is not a JSON object
        """
        data = await self._request(
            "POST",
            self._config.url_for(OpsmlRoute.MODEL_METADATA),
            json=payload,
        )
        if not isinstance(data, dict):
            raise MalformedResponseError(
                f"Expected metadata object, got {type(data).__name__}"
            )
        return data

    async def list_files(self, remote_path: str) -> list[str]:
        """
        List every remote file nested under a path.

        Args:
            remote_path: Remote path prefix (file or directory)

        Returns:
            Remote file paths in server order

        Raises:
            ListingError: If the request fails or the body is malformed
            ClientConnectionError: If the server cannot be reached
        """
        try:
            data = await self._request(
                "GET",
                self._config.url_for(OpsmlRoute.LIST_FILES),
                rejected_error=ListingError,
                params={"path": remote_path},
            )
        except MalformedResponseError as e:
            raise ListingError(f"Invalid listing for {remote_path}: {e}") from e

        files = data.get("files") if isinstance(data, dict) else None
        if not isinstance(files, list) or not all(isinstance(f, str) for f in files):
            raise ListingError(f"Response missing 'files' list for {remote_path}")

        logger.debug(f"Listed {len(files)} files under {remote_path}")
        return files

    async def authorize(self, remote_path: str) -> TransferAuthorization:
        """
        Exchange a remote file path for a presigned download url.

        Args:
            remote_path: Remote file path

        Returns:
            TransferAuthorization for one fetch

        Raises:
            AuthorizationDeniedError: If the server refuses or answers without a url
            ClientConnectionError: If the server cannot be reached
        """
        try:
            data = await self._request(
                "GET",
                self._config.url_for(OpsmlRoute.PRESIGNED_URL),
                rejected_error=AuthorizationDeniedError,
                params={"path": remote_path, "method": "GET"},
            )
            return TransferAuthorization.from_dict(data)
        except (MalformedResponseError, KeyError, TypeError) as e:
            raise AuthorizationDeniedError(
                f"Invalid presigned url response for {remote_path}: {e}"
            ) from e

    async def stream_to_file(
        self,
        authorization: TransferAuthorization,
        local_path: Path,
    ) -> int:
        """
        Stream an authorized remote file to disk in bounded chunks.

        The local file is created or truncated before the first chunk.

        Args:
            authorization: Presigned url for the file
            local_path: Destination file (parent directory must exist)

        Returns:
            Number of bytes written

        Raises:
            TransferFailedError: If the fetch or the local write fails
        """
        written = 0
        try:
            async with self._client() as client:
                async with client.stream("GET", authorization.url) as response:
                    if not response.is_success:
                        await response.aread()
                        raise TransferFailedError(
                            f"Download failed: {response.status_code} - {response.text}"
                        )

                    with open(local_path, "wb") as f:
                        async for chunk in response.aiter_bytes(
                            chunk_size=self._config.chunk_size
                        ):
                            f.write(chunk)
                            written += len(chunk)
        except httpx.HTTPError as e:
            raise TransferFailedError(
                f"Failed to read response for {local_path}: {e}"
            ) from e
        except OSError as e:
            raise TransferFailedError(
                f"Failed to write response to file {local_path}: {e}"
            ) from e

        return written

    async def list_cards(self, payload: dict[str, Any]) -> Any:
        """
        List cards from a registry.

        Raises:
            ServerRejectedError: If the server rejects the request
            MalformedResponseError: If the body is not valid JSON
        """
        return await self._request(
            "POST",
            self._config.url_for(OpsmlRoute.LIST_CARDS),
            json=payload,
        )

    async def get_metrics(self, run_uid: str) -> Any:
        """
        Fetch metrics recorded for a run.

        Raises:
            ServerRejectedError: If the server rejects the request
            MalformedResponseError: If the body is not valid JSON
        """
        return await self._request(
            "GET",
            self._config.url_for(OpsmlRoute.METRICS),
            params={"run_uid": run_uid},
        )
