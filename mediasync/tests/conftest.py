"""Shared test fixtures for the mediasync test suite."""

import logging
from typing import Dict, List, Optional, Sequence, Set
from unittest.mock import MagicMock

import pytest

from mediasync.config import SyncSettings
from mediasync.models import MediaAttachment, RawAsset

ENV_KEYS = [
    "SHOPIFY_STORE_DOMAIN",
    "SHOPIFY_SHOP_DOMAIN",
    "SHOPIFY_ADMIN_TOKEN",
    "SHOPIFY_ADMIN_API_TOKEN",
    "SHOPIFY_API_VERSION",
    "GHL_FILES_ENDPOINT",
    "GHL_API_KEY",
    "PRODUCT_CODE_REGEX",
    "PRODUCT_HANDLE_TEMPLATE",
    "DRY_RUN",
    "MEDIA_BATCH_SIZE",
    "MAX_RETRIES",
]


def make_response(status: int = 200, body=None, text: Optional[str] = None) -> MagicMock:
    """Build a stand-in for requests.Response."""
    resp = MagicMock()
    resp.status_code = status
    resp.ok = status < 400
    resp.text = text if text is not None else ("" if body is None else str(body))
    if body is None:
        resp.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        resp.json.return_value = body
    return resp


class FakeCatalog:
    """In-memory catalog that records every call."""

    def __init__(self, products: Optional[Dict[str, str]] = None, media: Optional[Dict[str, List[str]]] = None):
        # handle -> product id
        self.products = products or {}
        # product id -> alt texts
        self.media: Dict[str, List[str]] = media or {}
        self.resolve_calls: List[tuple] = []
        self.attach_calls: List[tuple] = []

    def resolve_product(self, handle, code):
        self.resolve_calls.append((handle, code))
        return self.products.get(handle)

    def list_existing_media_alt_texts(self, product_id) -> Set[str]:
        return {alt.strip() for alt in self.media.get(product_id, []) if alt.strip()}

    def attach_media(self, product_id, batch: Sequence[MediaAttachment]):
        self.attach_calls.append((product_id, list(batch)))
        self.media.setdefault(product_id, []).extend(m.alt for m in batch)
        return [m.to_input() for m in batch]


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every sync-related variable from the environment."""
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


@pytest.fixture
def base_env() -> Dict[str, str]:
    return {
        "SHOPIFY_STORE_DOMAIN": "example.myshopify.com",
        "SHOPIFY_ADMIN_TOKEN": "shpat_1234567890abcdef",
        "GHL_FILES_ENDPOINT": "https://files.example.com/list",
    }


@pytest.fixture
def settings() -> SyncSettings:
    return SyncSettings(
        shop_domain="example.myshopify.com",
        admin_token="shpat_1234567890abcdef",
        files_endpoint="https://files.example.com/list",
    )


@pytest.fixture
def fake_catalog() -> FakeCatalog:
    return FakeCatalog(products={"cs1": "gid://shopify/Product/1"})


@pytest.fixture
def sample_assets() -> List[RawAsset]:
    return [
        RawAsset(url="https://cdn.example.com/CS1_front.jpg", name="CS1_front.jpg"),
        RawAsset(url="https://cdn.example.com/CS1_back.jpg", name="CS1_back.jpg"),
        RawAsset(url="https://cdn.example.com/widget.png", name="widget.png"),
    ]


@pytest.fixture
def response_factory():
    """Return the make_response helper."""
    return make_response


@pytest.fixture
def catalog_factory():
    """Return the FakeCatalog class for tests that need a custom setup."""
    return FakeCatalog


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers bound to captured streams or temp dirs once a test finishes."""
    yield
    logger = logging.getLogger("mediasync")
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.propagate = True
