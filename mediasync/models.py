"""Data models for assets, media attachments and run results."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

__all__ = [
    "RawAsset",
    "MediaKind",
    "MediaAttachment",
    "GroupResult",
    "SyncSummary",
]


@dataclass(frozen=True)
class RawAsset:
    """A single file from the asset source, after normalization."""

    url: str
    name: str
    mime: str = ""


class MediaKind(str, Enum):
    """Media content types accepted by the catalog."""

    IMAGE = "IMAGE"
    VIDEO = "VIDEO"
    EXTERNAL_VIDEO = "EXTERNAL_VIDEO"


@dataclass(frozen=True)
class MediaAttachment:
    """One media item to create on a product.

    ``alt`` is the trimmed display name and is also the identity used to
    detect media that is already attached.
    """

    alt: str
    kind: MediaKind
    source_url: str

    def to_input(self) -> Dict[str, Any]:
        """Return the ``CreateMediaInput`` payload for this attachment."""
        return {
            "alt": self.alt,
            "mediaContentType": self.kind.value,
            "originalSource": self.source_url,
        }


@dataclass
class GroupResult:
    """Outcome of processing one product code."""

    code: str
    handle: str
    product_id: Optional[str] = None
    total: int = 0
    skipped: int = 0
    pending: int = 0
    attached: int = 0
    batches: int = 0

    @property
    def found(self) -> bool:
        return self.product_id is not None


@dataclass
class SyncSummary:
    """Totals for a whole sync run."""

    assets: int = 0
    groups: int = 0
    attached: int = 0
    skipped: int = 0
    would_attach: int = 0
    dry_run: bool = False
    missing_codes: List[str] = field(default_factory=list)
    results: List[GroupResult] = field(default_factory=list)
    message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "assets": self.assets,
            "groups": self.groups,
            "attached": self.attached,
            "skipped": self.skipped,
            "would_attach": self.would_attach,
            "dry_run": self.dry_run,
            "missing_codes": list(self.missing_codes),
            "message": self.message,
        }
