"""End-to-end media sync workflow.

Fetches assets, groups them by product code, resolves each code to a
catalog product and attaches the media that is not already present.
Groups are processed one at a time; any remote failure aborts the run.
"""

from typing import Dict, Iterable, Iterator, List, Optional, Pattern, Sequence, Set, TypeVar

from mediasync.catalog import CatalogClient
from mediasync.codes import derive_handle, extract_code
from mediasync.config import SyncSettings
from mediasync.logging_config import get_logger, log_sync_event
from mediasync.media import classify_media, display_name
from mediasync.models import GroupResult, MediaAttachment, RawAsset, SyncSummary
from mediasync.rpc import RpcClient
from mediasync.source import fetch_assets

__all__ = [
    "build_attachment",
    "group_assets",
    "select_new_media",
    "chunked",
    "process_group",
    "run_sync",
]

logger = get_logger("sync")

T = TypeVar("T")


def build_attachment(asset: RawAsset) -> MediaAttachment:
    """Turn a raw asset into the media input sent to the catalog."""
    name = display_name(asset.name, asset.url)
    return MediaAttachment(
        alt=name.strip(),
        kind=classify_media(asset.mime, name),
        source_url=asset.url,
    )


def group_assets(assets: Iterable[RawAsset], pattern: Pattern[str]) -> Dict[str, List[MediaAttachment]]:
    """Group attachments by product code, keeping source order.

    Assets whose name (or URL, when the name is empty) has no code are left out.
    """
    groups: Dict[str, List[MediaAttachment]] = {}
    for asset in assets:
        code = extract_code(asset.name or asset.url, pattern)
        if not code:
            continue
        groups.setdefault(code, []).append(build_attachment(asset))
    return groups


def select_new_media(attachments: Sequence[MediaAttachment], existing_alts: Set[str]) -> List[MediaAttachment]:
    """Attachments whose trimmed alt text is not already on the product."""
    return [m for m in attachments if (m.alt or "").strip() not in existing_alts]


def chunked(items: Sequence[T], size: int) -> Iterator[List[T]]:
    """Yield consecutive slices of at most ``size`` items."""
    if size < 1:
        raise ValueError(f"Batch size must be at least 1, got {size}")
    for start in range(0, len(items), size):
        yield list(items[start:start + size])


def process_group(
    code: str,
    attachments: Sequence[MediaAttachment],
    catalog: CatalogClient,
    settings: SyncSettings,
) -> GroupResult:
    """Resolve, diff and attach the media for one product code."""
    handle = derive_handle(code, settings.handle_template)
    label = handle or code
    result = GroupResult(code=code, handle=handle, total=len(attachments))

    result.product_id = catalog.resolve_product(handle, code)
    if not result.product_id:
        logger.warning(f"No product found for code={code} (tried handle=\"{handle}\" and sku:{code})")
        log_sync_event("product_missing", {"code": code, "handle": handle})
        return result

    existing = catalog.list_existing_media_alt_texts(result.product_id)
    to_attach = select_new_media(attachments, existing)
    result.skipped = len(attachments) - len(to_attach)
    result.pending = len(to_attach)

    if not to_attach:
        logger.info(f"Nothing new for product({label}).")
        return result

    if settings.dry_run:
        logger.info(f"[DRY_RUN] Would attach {len(to_attach)} media → product({label})")
        return result

    for batch in chunked(to_attach, settings.batch_size):
        catalog.attach_media(result.product_id, batch)
        result.attached += len(batch)
        result.batches += 1
        logger.info(f"Attached {len(batch)}/{len(to_attach)} → product({label})")

    log_sync_event("group_attached", {
        "code": code,
        "product_id": result.product_id,
        "attached": result.attached,
        "skipped": result.skipped,
        "batches": result.batches,
    })
    return result


def run_sync(
    settings: SyncSettings,
    rpc: Optional[RpcClient] = None,
    catalog: Optional[CatalogClient] = None,
    assets: Optional[List[RawAsset]] = None,
) -> SyncSummary:
    """Run the whole sync once.

    Args:
        settings: Resolved settings
        rpc: RPC client (default: one built from settings)
        catalog: Catalog client (default: one built from settings)
        assets: Pre-fetched assets; fetched from the asset source when None

    Returns:
        SyncSummary with attached/skipped totals

    Raises:
        MediaSyncError: On any unrecoverable fetch, lookup or attach failure
    """
    rpc = rpc or RpcClient(max_retries=settings.max_retries)
    catalog = catalog or CatalogClient.from_settings(settings, rpc)
    summary = SyncSummary(dry_run=settings.dry_run)

    log_sync_event("sync_start", {
        "endpoint": settings.files_endpoint,
        "shop": settings.shop_domain,
        "dry_run": settings.dry_run,
    })

    if assets is None:
        assets = fetch_assets(rpc, settings.files_endpoint, settings.files_api_key)
    summary.assets = len(assets)
    if not assets:
        summary.message = "No files returned from the asset source."
        logger.info(summary.message)
        return summary

    pattern = settings.compiled_code_pattern()
    groups = group_assets(assets, pattern)
    summary.groups = len(groups)
    if not groups:
        summary.message = f"No filenames matched PRODUCT_CODE_REGEX ({pattern.pattern})."
        logger.info(summary.message)
        return summary

    logger.info(f"Fetched {len(assets)} files, {len(groups)} product codes")

    for code, attachments in groups.items():
        result = process_group(code, attachments, catalog, settings)
        summary.results.append(result)
        if not result.found:
            summary.missing_codes.append(code)
            continue
        summary.attached += result.attached
        summary.skipped += result.skipped
        summary.would_attach += result.pending

    log_sync_event("sync_complete", summary.to_dict())
    return summary
