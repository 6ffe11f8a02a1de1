"""Asset to catalog media sync package."""

__version__ = "0.1.0"

# Re-export main components for convenient imports
from mediasync.catalog import CatalogClient
from mediasync.codes import derive_handle, extract_code
from mediasync.config import SyncSettings, load_settings, mask_secret, resolve_env
from mediasync.errors import (
    CatalogValidationError,
    ConfigurationError,
    MediaSyncError,
    RemoteCallError,
    SourceFormatError,
)
from mediasync.media import classify_media
from mediasync.models import MediaAttachment, MediaKind, RawAsset, SyncSummary
from mediasync.rpc import RpcClient
from mediasync.sync import group_assets, run_sync

__all__ = [
    # Version
    "__version__",
    # Config
    "SyncSettings",
    "load_settings",
    "resolve_env",
    "mask_secret",
    # Errors
    "MediaSyncError",
    "ConfigurationError",
    "SourceFormatError",
    "RemoteCallError",
    "CatalogValidationError",
    # Models
    "RawAsset",
    "MediaKind",
    "MediaAttachment",
    "SyncSummary",
    # Core functions
    "extract_code",
    "derive_handle",
    "classify_media",
    "group_assets",
    "RpcClient",
    "CatalogClient",
    "run_sync",
]
