"""Model retrieval: metadata, download planning and retried file transfer."""

from .downloader import (
    MODEL_METADATA_FILE,
    ModelDownloader,
    download_model,
    download_model_metadata,
)
from .errors import (
    DownloadCancelledError,
    DownloadExhaustedError,
    InvalidReferenceError,
    LocalIOError,
    MissingVariantError,
    ModelError,
    RemotePathError,
)
from .models import (
    DataSchema,
    DownloadFlags,
    DownloadPlan,
    DownloadResult,
    Feature,
    ModelMetadata,
    ModelReference,
    check_reference,
)
from .planner import (
    MODEL_SAVE_ROOT,
    get_remote_root,
    local_path_for,
    plan_download,
    select_model_uri,
    select_preprocessor_uri,
)
from .retry import FileDownloader, RetryConfig

__all__ = [
    # Entry points
    "download_model_metadata",
    "download_model",
    # Errors
    "ModelError",
    "InvalidReferenceError",
    "MissingVariantError",
    "RemotePathError",
    "LocalIOError",
    "DownloadExhaustedError",
    "DownloadCancelledError",
    # Models
    "ModelReference",
    "check_reference",
    "Feature",
    "DataSchema",
    "ModelMetadata",
    "DownloadFlags",
    "DownloadPlan",
    "DownloadResult",
    # Planning
    "MODEL_SAVE_ROOT",
    "get_remote_root",
    "select_model_uri",
    "select_preprocessor_uri",
    "plan_download",
    "local_path_for",
    # Components (for advanced usage/testing)
    "MODEL_METADATA_FILE",
    "ModelDownloader",
    "FileDownloader",
    "RetryConfig",
]
