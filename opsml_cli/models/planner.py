"""Remote path planning and local layout for model downloads."""

from __future__ import annotations

from pathlib import Path, PurePosixPath

from .errors import MissingVariantError, RemotePathError
from .models import DownloadFlags, DownloadPlan, ModelMetadata

# Storage prefix under which the server saves every model version
MODEL_SAVE_ROOT = "opsml-root:/OPSML_MODEL_REGISTRY"


def get_remote_root(metadata: ModelMetadata) -> str:
    """
    Get the remote directory holding all files of a model version.

    Format: {MODEL_SAVE_ROOT}/{repository}/{name}/v{version}
    """
    return (
        f"{MODEL_SAVE_ROOT}/{metadata.model_repository}/"
        f"{metadata.model_name}/v{metadata.model_version}"
    )


def select_model_uri(metadata: ModelMetadata, onnx: bool, quantize: bool) -> str:
    """
    Pick the model artifact to download.

    quantize only applies together with onnx.

    Raises:
        MissingVariantError: If the requested variant is not in the metadata
    """
    if onnx:
        if quantize:
            if metadata.quantized_model_uri is None:
                raise MissingVariantError("quantized model")
            return metadata.quantized_model_uri

        if metadata.onnx_uri is None:
            raise MissingVariantError("onnx model")
        return metadata.onnx_uri

    return metadata.model_uri


def select_preprocessor_uri(metadata: ModelMetadata) -> str | None:
    """Get the first of preprocessor, tokenizer, feature extractor uri that is set."""
    for uri in (
        metadata.preprocessor_uri,
        metadata.tokenizer_uri,
        metadata.feature_extractor_uri,
    ):
        if uri is not None:
            return uri
    return None


def plan_download(metadata: ModelMetadata, flags: DownloadFlags) -> DownloadPlan:
    """
    Compute remote locations for a download.

    Args:
        metadata: Model metadata from the server
        flags: Which artifacts the caller asked for

    Returns:
        DownloadPlan (preprocessor_uri is None unless requested and present)

    Raises:
        MissingVariantError: If the requested model variant is absent
    """
    return DownloadPlan(
        remote_root=get_remote_root(metadata),
        model_uri=select_model_uri(metadata, flags.onnx, flags.quantize),
        preprocessor_uri=(
            select_preprocessor_uri(metadata) if flags.preprocessor else None
        ),
    )


def local_path_for(remote_file: str, remote_root: str, write_dir: Path | str) -> Path:
    """
    Map a remote file onto the local write directory.

    The remote root prefix is stripped and the remainder joined onto
    write_dir, e.g. "{root}/weights/part1.bin" -> "{write_dir}/weights/part1.bin".

    Raises:
        RemotePathError: If remote_file is not under remote_root
    """
    try:
        relative = PurePosixPath(remote_file).relative_to(PurePosixPath(remote_root))
    except ValueError as e:
        raise RemotePathError(
            f"Remote file {remote_file} is not under {remote_root}"
        ) from e

    if not relative.parts or ".." in relative.parts:
        raise RemotePathError(
            f"Remote file {remote_file} does not name a file under {remote_root}"
        )

    return Path(write_dir).joinpath(*relative.parts)
