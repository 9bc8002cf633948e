"""Data models for model retrieval."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import InvalidReferenceError

REFERENCE_USAGE = "Please provide either a uid or a name, repository, and version"


def check_reference(
    name: str | None,
    repository: str | None,
    version: str | None,
    uid: str | None,
) -> None:
    """
    Validate the combination of identifying fields.

    A reference is valid when "name, repository and version all absent" and
    "uid absent" disagree.

    Raises:
        InvalidReferenceError: If both flags agree
    """
    has_common = all(arg is None for arg in (name, version, repository))
    has_uid = uid is None

    if has_common == has_uid:
        raise InvalidReferenceError(REFERENCE_USAGE)


@dataclass(frozen=True)
class ModelReference:
    """
    Logical reference to one model version.

    Identified either by uid or by (name, repository, version).
    Validated on construction.
    """

    name: str | None = None
    repository: str | None = None
    version: str | None = None
    uid: str | None = None

    def __post_init__(self) -> None:
        check_reference(self.name, self.repository, self.version, self.uid)

    def to_request(self, ignore_release_candidates: bool = False) -> dict[str, Any]:
        """Build the metadata request body."""
        return {
            "name": self.name,
            "repository": self.repository,
            "version": self.version,
            "uid": self.uid,
            "ignore_release_candidates": ignore_release_candidates,
        }

    def __str__(self) -> str:
        if self.uid is not None:
            return f"uid={self.uid}"
        return f"{self.repository}/{self.name}:{self.version}"


@dataclass(frozen=True)
class Feature:
    """Type and shape of one model input or output."""

    feature_type: str
    shape: Any

    def to_dict(self) -> dict:
        return {"feature_type": self.feature_type, "shape": self.shape}

    @classmethod
    def from_dict(cls, data: dict) -> Feature:
        return cls(feature_type=data["feature_type"], shape=data["shape"])


def _features_from_dict(data: dict | None) -> dict[str, Feature] | None:
    if data is None:
        return None
    return {key: Feature.from_dict(value) for key, value in data.items()}


def _features_to_dict(features: dict[str, Feature] | None) -> dict | None:
    if features is None:
        return None
    return {key: feature.to_dict() for key, feature in features.items()}


@dataclass(frozen=True)
class DataSchema:
    """Input/output description of a model and its onnx conversion."""

    data_type: str | None = None
    input_features: dict[str, Feature] | None = None
    output_features: dict[str, Feature] | None = None
    onnx_input_features: dict[str, Feature] | None = None
    onnx_output_features: dict[str, Feature] | None = None
    onnx_data_type: str | None = None
    onnx_version: str | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "data_type": self.data_type,
            "input_features": _features_to_dict(self.input_features),
            "output_features": _features_to_dict(self.output_features),
            "onnx_input_features": _features_to_dict(self.onnx_input_features),
            "onnx_output_features": _features_to_dict(self.onnx_output_features),
            "onnx_data_type": self.onnx_data_type,
            "onnx_version": self.onnx_version,
        }

    @classmethod
    def from_dict(cls, data: dict) -> DataSchema:
        """Create from dictionary (JSON deserialization)."""
        return cls(
            data_type=data.get("data_type"),
            input_features=_features_from_dict(data.get("input_features")),
            output_features=_features_from_dict(data.get("output_features")),
            onnx_input_features=_features_from_dict(data.get("onnx_input_features")),
            onnx_output_features=_features_from_dict(data.get("onnx_output_features")),
            onnx_data_type=data.get("onnx_data_type"),
            onnx_version=data.get("onnx_version"),
        )


def _str_field(data: dict, key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise TypeError(f"{key} must be a string, got {type(value).__name__}")
    return value


def _optional_str_field(data: dict, key: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise TypeError(f"{key} must be a string, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class ModelMetadata:
    """
    Server-issued description of one model version.

    Holds the storage uris of the trained model, its optional onnx and
    quantized variants, and the optional preprocessor family
    (preprocessor, tokenizer, feature extractor).
    """

    model_name: str
    model_class: str
    model_type: str
    model_interface: str
    model_uri: str
    model_version: str
    model_repository: str
    sample_data_uri: str
    data_schema: DataSchema
    onnx_uri: str | None = None
    onnx_version: str | None = None
    preprocessor_uri: str | None = None
    preprocessor_name: str | None = None
    tokenizer_uri: str | None = None
    tokenizer_name: str | None = None
    feature_extractor_uri: str | None = None
    feature_extractor_name: str | None = None
    quantized_model_uri: str | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "model_name": self.model_name,
            "model_class": self.model_class,
            "model_type": self.model_type,
            "model_interface": self.model_interface,
            "onnx_uri": self.onnx_uri,
            "onnx_version": self.onnx_version,
            "model_uri": self.model_uri,
            "model_version": self.model_version,
            "model_repository": self.model_repository,
            "sample_data_uri": self.sample_data_uri,
            "data_schema": self.data_schema.to_dict(),
            "preprocessor_uri": self.preprocessor_uri,
            "preprocessor_name": self.preprocessor_name,
            "tokenizer_uri": self.tokenizer_uri,
            "tokenizer_name": self.tokenizer_name,
            "feature_extractor_uri": self.feature_extractor_uri,
            "feature_extractor_name": self.feature_extractor_name,
            "quantized_model_uri": self.quantized_model_uri,
        }

    @classmethod
    def from_dict(cls, data: dict) -> ModelMetadata:
        """
        Create from dictionary (JSON metadata response).

        Raises:
            KeyError: If a required field is missing
            TypeError: If a uri, name or version is not a string
            AttributeError: If data_schema is not an object
        """
        return cls(
            model_name=_str_field(data, "model_name"),
            model_class=_str_field(data, "model_class"),
            model_type=_str_field(data, "model_type"),
            model_interface=_str_field(data, "model_interface"),
            model_uri=_str_field(data, "model_uri"),
            model_version=_str_field(data, "model_version"),
            model_repository=_str_field(data, "model_repository"),
            sample_data_uri=_str_field(data, "sample_data_uri"),
            data_schema=DataSchema.from_dict(data["data_schema"]),
            onnx_uri=_optional_str_field(data, "onnx_uri"),
            onnx_version=_optional_str_field(data, "onnx_version"),
            preprocessor_uri=_optional_str_field(data, "preprocessor_uri"),
            preprocessor_name=_optional_str_field(data, "preprocessor_name"),
            tokenizer_uri=_optional_str_field(data, "tokenizer_uri"),
            tokenizer_name=_optional_str_field(data, "tokenizer_name"),
            feature_extractor_uri=_optional_str_field(data, "feature_extractor_uri"),
            feature_extractor_name=_optional_str_field(data, "feature_extractor_name"),
            quantized_model_uri=_optional_str_field(data, "quantized_model_uri"),
        )


@dataclass(frozen=True)
class DownloadFlags:
    """Caller choices for which artifacts to fetch."""

    onnx: bool = False
    quantize: bool = False
    preprocessor: bool = False


@dataclass(frozen=True)
class DownloadPlan:
    """
    Remote locations for one download-model invocation.

    Derived from metadata and DownloadFlags; never persisted.
    """

    remote_root: str
    model_uri: str
    preprocessor_uri: str | None = None


@dataclass
class DownloadResult:
    """
    Outcome of a completed model download.

    Lists local files in the order they were written.
    """

    metadata: ModelMetadata
    plan: DownloadPlan
    files: list[Path] = field(default_factory=list)
