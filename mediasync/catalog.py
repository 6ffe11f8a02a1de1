"""Catalog operations on top of the GraphQL admin API."""

import json
from typing import Any, Dict, List, Optional, Sequence, Set

from mediasync.config import MEDIA_PAGE_SIZE, SyncSettings
from mediasync.errors import CatalogValidationError
from mediasync.logging_config import get_logger
from mediasync.models import MediaAttachment
from mediasync.rpc import RpcClient

__all__ = [
    "PRODUCT_BY_HANDLE_QUERY",
    "PRODUCT_BY_SKU_QUERY",
    "PRODUCT_MEDIA_QUERY",
    "CREATE_MEDIA_MUTATION",
    "CatalogClient",
]

logger = get_logger("catalog")

PRODUCT_BY_HANDLE_QUERY = "query($handle:String!){ product(handle:$handle){ id } }"

PRODUCT_BY_SKU_QUERY = (
    "query($q:String!){ products(first:1, query:$q){ edges{ node{ id title } } } }"
)

PRODUCT_MEDIA_QUERY = """
query($id:ID!, $first:Int!){
  product(id:$id){
    media(first:$first){ edges{ node{ alt } } }
  }
}
"""

CREATE_MEDIA_MUTATION = """
mutation($productId:ID!, $media:[CreateMediaInput!]!){
  productCreateMedia(productId:$productId, media:$media){
    media { alt mediaContentType status }
    mediaUserErrors { code field message }
  }
}
"""


class CatalogClient:
    """Product lookup and media operations against the catalog."""

    def __init__(self, rpc: RpcClient, endpoint: str, access_token: str) -> None:
        self.rpc = rpc
        self.endpoint = endpoint
        self._headers = {"X-Shopify-Access-Token": access_token}

    @classmethod
    def from_settings(cls, settings: SyncSettings, rpc: RpcClient) -> "CatalogClient":
        return cls(rpc, settings.graphql_url, settings.admin_token)

    def _query(self, query: str, variables: Dict[str, Any], **kwargs: Any) -> Dict[str, Any]:
        return self.rpc.graphql(self.endpoint, query, variables, headers=self._headers, **kwargs)

    def resolve_product(self, handle: Optional[str], code: Optional[str]) -> Optional[str]:
        """Find a product ID by handle, then by ``sku:<code>``.

        Returns:
            The product ID, or None when neither lookup matches
        """
        if handle:
            data = self._query(PRODUCT_BY_HANDLE_QUERY, {"handle": handle})
            product = data.get("product") or {}
            if product.get("id"):
                return product["id"]

        if code:
            data = self._query(PRODUCT_BY_SKU_QUERY, {"q": f"sku:{code}"})
            edges = (data.get("products") or {}).get("edges") or []
            node = ((edges[0] if edges else None) or {}).get("node") or {}
            if node.get("id"):
                return node["id"]

        return None

    def list_existing_media_alt_texts(self, product_id: str) -> Set[str]:
        """Return the trimmed, non-empty alt texts of a product's first media page."""
        data = self._query(PRODUCT_MEDIA_QUERY, {"id": product_id, "first": MEDIA_PAGE_SIZE})
        media = (data.get("product") or {}).get("media") or {}
        alts: Set[str] = set()
        for edge in media.get("edges") or []:
            alt = ((edge or {}).get("node") or {}).get("alt") or ""
            alt = alt.strip()
            if alt:
                alts.add(alt)
        return alts

    def attach_media(self, product_id: str, batch: Sequence[MediaAttachment]) -> List[Dict[str, Any]]:
        """Create one batch of media on a product.

        Returns:
            The created media records reported by the catalog

        Raises:
            CatalogValidationError: If the mutation reports user errors
            RemoteCallError: If the call itself fails
        """
        if not batch:
            return []

        data = self._query(
            CREATE_MEDIA_MUTATION,
            {"productId": product_id, "media": [m.to_input() for m in batch]},
            retry_transport=False,
        )
        result = data.get("productCreateMedia") or {}
        user_errors = result.get("mediaUserErrors") or []
        if user_errors:
            raise CatalogValidationError(
                f"mediaUserErrors: {json.dumps(user_errors)}", user_errors=user_errors
            )
        return result.get("media") or []
