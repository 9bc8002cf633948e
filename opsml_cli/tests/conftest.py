"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from opsml_cli.client import ClientConfig, OpsmlClient, TransferAuthorization
from opsml_cli.models import ModelMetadata

TRACKING_URI = "http://opsml.example.com"

METADATA: dict[str, Any] = {
    "model_name": "linear-reg-model",
    "model_class": "SklearnEstimator",
    "model_type": "LinearRegression",
    "model_interface": "SklearnModel",
    "onnx_uri": "models.json",
    "onnx_version": "1.14.1",
    "model_uri": "opsml-root:/OPSML_MODEL_REGISTRY/devops-ml/linear-reg-model/v1.1.0/model",
    "model_version": "1.1.0",
    "model_repository": "devops-ml",
    "sample_data_uri": "opsml-root:/OPSML_MODEL_REGISTRY/devops-ml/linear-reg-model/v1.1.0/sample.joblib",
    "data_schema": {
        "data_type": "numpy.ndarray",
        "input_features": {
            "inputs": {"feature_type": "FLOAT", "shape": [1, 10]},
        },
        "output_features": {
            "outputs": {"feature_type": "FLOAT", "shape": [1, 1]},
        },
        "onnx_input_features": None,
        "onnx_output_features": None,
        "onnx_data_type": None,
        "onnx_version": "1.14.1",
    },
    "preprocessor_uri": "preprocessor.json",
    "preprocessor_name": "StandardScaler",
    "tokenizer_uri": None,
    "tokenizer_name": None,
    "feature_extractor_uri": None,
    "feature_extractor_name": None,
    "quantized_model_uri": None,
}


@pytest.fixture
def metadata_dict() -> dict[str, Any]:
    """Metadata document as returned by the server."""
    return copy.deepcopy(METADATA)


@pytest.fixture
def model_metadata(metadata_dict: dict[str, Any]) -> ModelMetadata:
    """Parsed model metadata."""
    return ModelMetadata.from_dict(metadata_dict)


@pytest.fixture
def client_config() -> ClientConfig:
    """Client config pointing at a fake server."""
    return ClientConfig(tracking_uri=TRACKING_URI, timeout=5.0, chunk_size=4)


@pytest.fixture
def mock_client(metadata_dict: dict[str, Any]) -> MagicMock:
    """
    Mock OpsmlClient.

    authorize() hands out a presigned url per call and stream_to_file()
    writes b"test" to the requested path.
    """

    async def _stream(authorization: TransferAuthorization, local_path: Path) -> int:
        local_path.write_bytes(b"test")
        return 4

    client = MagicMock(spec=OpsmlClient)
    client.get_model_metadata = AsyncMock(return_value=metadata_dict)
    client.list_files = AsyncMock(return_value=[])
    client.authorize = AsyncMock(
        return_value=TransferAuthorization(url="https://storage.example.com/signed")
    )
    client.stream_to_file = AsyncMock(side_effect=_stream)
    client.list_cards = AsyncMock(return_value={"cards": []})
    client.get_metrics = AsyncMock(return_value={"metric": []})
    return client
