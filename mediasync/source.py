"""Asset source fetching and response normalization."""

from typing import Any, List

from mediasync.errors import SourceFormatError
from mediasync.logging_config import get_logger
from mediasync.media import filename_from_url
from mediasync.models import RawAsset
from mediasync.rpc import RpcClient

__all__ = ["normalize_assets", "fetch_assets"]

logger = get_logger("source")

SHAPE_HINT = "an array (or {files:[]}) of { url|link|path, name?, mime|type? }"


def _first(entry: dict, *keys: str) -> str:
    for key in keys:
        value = entry.get(key)
        if value:
            return str(value)
    return ""


def normalize_assets(payload: Any) -> List[RawAsset]:
    """Convert an asset source response body into RawAsset records.

    Accepts a top-level list or an object with a ``files`` list. Entries
    without a location under ``url``/``link``/``path`` are dropped.

    Raises:
        SourceFormatError: If the body is neither shape
    """
    if isinstance(payload, list):
        entries = payload
    elif isinstance(payload, dict) and isinstance(payload.get("files"), list):
        entries = payload["files"]
    else:
        raise SourceFormatError(f"Asset endpoint must return {SHAPE_HINT}")

    assets: List[RawAsset] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        url = _first(entry, "url", "link", "path")
        if not url:
            continue
        assets.append(
            RawAsset(
                url=url,
                name=_first(entry, "name") or filename_from_url(url),
                mime=_first(entry, "mime", "type"),
            )
        )

    dropped = len(entries) - len(assets)
    if dropped:
        logger.debug(f"Dropped {dropped} asset entries without a location")
    return assets


def fetch_assets(client: RpcClient, endpoint: str, api_key: str = "") -> List[RawAsset]:
    """Fetch and normalize the full asset list.

    Args:
        client: RPC client used for the request
        endpoint: Asset source URL
        api_key: Optional bearer token

    Raises:
        RemoteCallError: If the request fails
        SourceFormatError: If the body is not JSON of the expected shape
    """
    headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
    resp = client.fetch(endpoint, headers=headers, label="Asset fetch")
    try:
        payload = resp.json()
    except ValueError as e:
        raise SourceFormatError(f"Asset endpoint did not return JSON: {e}") from e
    return normalize_assets(payload)
