"""Configuration and constants for the media sync."""

import os
from dataclasses import dataclass
from typing import List, Mapping, Optional, Pattern, Sequence, Tuple

from mediasync.errors import ConfigurationError

__all__ = [
    "SHOP_DOMAIN_KEYS",
    "ADMIN_TOKEN_KEYS",
    "API_VERSION_KEY",
    "FILES_ENDPOINT_KEY",
    "FILES_API_KEY_KEY",
    "DEFAULT_API_VERSION",
    "DEFAULT_CODE_PATTERN",
    "DEFAULT_HANDLE_TEMPLATE",
    "DEFAULT_BATCH_SIZE",
    "DEFAULT_MAX_RETRIES",
    "RETRY_BACKOFF_BASE",
    "RETRY_STATUS_CODES",
    "REQUEST_TIMEOUT",
    "MEDIA_PAGE_SIZE",
    "HEADERS",
    "SyncSettings",
    "resolve_env",
    "mask_secret",
    "parse_bool",
    "parse_int",
    "load_settings",
]

# Environment keys, in lookup order
SHOP_DOMAIN_KEYS = ["SHOPIFY_STORE_DOMAIN", "SHOPIFY_SHOP_DOMAIN"]
ADMIN_TOKEN_KEYS = ["SHOPIFY_ADMIN_TOKEN", "SHOPIFY_ADMIN_API_TOKEN"]
API_VERSION_KEY = "SHOPIFY_API_VERSION"
FILES_ENDPOINT_KEY = "GHL_FILES_ENDPOINT"
FILES_API_KEY_KEY = "GHL_API_KEY"

DEFAULT_API_VERSION = "2024-07"
DEFAULT_CODE_PATTERN = r"^CS\d+"
DEFAULT_HANDLE_TEMPLATE = "${codeLower}"
DEFAULT_BATCH_SIZE = 8
DEFAULT_MAX_RETRIES = 3

# Retry settings: delay before retry n is RETRY_BACKOFF_BASE * 2^(n-1) seconds
RETRY_BACKOFF_BASE = 0.6
RETRY_STATUS_CODES = frozenset({429, 500, 502, 503, 504})

# Request timeout (seconds)
REQUEST_TIMEOUT = 30

# Existing media fetched per product (no pagination beyond this)
MEDIA_PAGE_SIZE = 250

HEADERS = {
    "User-Agent": "mediasync/0.1 (asset to catalog media sync)",
}

REDACTED = "***"


def resolve_env(
    keys: Sequence[str],
    required: bool = False,
    name: str = "value",
    environ: Optional[Mapping[str, str]] = None,
) -> Tuple[str, str]:
    """Return the first non-empty value among several environment keys.

    Args:
        keys: Acceptable variable names, in priority order
        required: Raise if none of the keys is set
        name: Human-readable setting name for the error message
        environ: Mapping to read from (default: os.environ)

    Returns:
        (value, key) tuple; ("", "") when nothing is set and not required

    Raises:
        ConfigurationError: If required and no key carries a value
    """
    env = os.environ if environ is None else environ
    for key in keys:
        raw = env.get(key)
        if raw is not None and str(raw).strip():
            return str(raw).strip(), key
    if required:
        raise ConfigurationError(
            f"Missing required env {name}: set {' or '.join(keys)}"
        )
    return "", ""


def mask_secret(secret: Optional[str]) -> str:
    """Mask a secret for display, keeping the first and last 3 characters."""
    if not secret:
        return "(empty)"
    if len(secret) <= 6:
        return REDACTED
    return f"{secret[:3]}{REDACTED}{secret[-3:]}"


def parse_bool(value: Optional[str]) -> bool:
    """Only the literal 'true' (any case) counts as enabled."""
    return str(value or "false").strip().lower() == "true"


def parse_int(value: Optional[str], default: int, name: str) -> int:
    """Parse a positive integer setting, falling back to a default when unset."""
    if value is None or not str(value).strip():
        return default
    try:
        number = int(str(value).strip())
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from e
    if number < 1:
        raise ConfigurationError(f"{name} must be at least 1, got {number}")
    return number


@dataclass(frozen=True)
class SyncSettings:
    """Resolved settings for one sync run."""

    shop_domain: str
    admin_token: str
    files_endpoint: str
    files_api_key: str = ""
    api_version: str = DEFAULT_API_VERSION
    code_pattern: str = DEFAULT_CODE_PATTERN
    handle_template: str = DEFAULT_HANDLE_TEMPLATE
    dry_run: bool = False
    batch_size: int = DEFAULT_BATCH_SIZE
    max_retries: int = DEFAULT_MAX_RETRIES

    # Which environment key supplied each aliased value
    shop_domain_source: str = ""
    admin_token_source: str = ""
    files_endpoint_source: str = ""
    files_api_key_source: str = ""

    @property
    def graphql_url(self) -> str:
        return f"https://{self.shop_domain}/admin/api/{self.api_version}/graphql.json"

    def compiled_code_pattern(self) -> Pattern[str]:
        from mediasync.codes import compile_code_pattern

        return compile_code_pattern(self.code_pattern)

    def banner_lines(self) -> List[str]:
        """Human-readable startup summary with secrets masked."""
        key_line = "(not set)"
        if self.files_api_key_source:
            key_line = f"{mask_secret(self.files_api_key)}  (from {self.files_api_key_source})"
        return [
            f"Domain      : {self.shop_domain}  (from {self.shop_domain_source})",
            f"API version : {self.api_version}",
            f"Admin token : {mask_secret(self.admin_token)}  (from {self.admin_token_source})",
            f"GHL endpoint: {self.files_endpoint}  (from {self.files_endpoint_source})",
            f"GHL API key : {key_line}",
            f"DRY_RUN     : {self.dry_run}",
            f"Code regex  : {self.code_pattern}",
            f"Handle tpl  : {self.handle_template}",
            f"Batch size  : {self.batch_size}, Retries: {self.max_retries}",
        ]


def load_settings(environ: Optional[Mapping[str, str]] = None) -> SyncSettings:
    """Build SyncSettings from the environment.

    Required values are resolved first so a missing one aborts before any
    other parsing.

    Raises:
        ConfigurationError: If a required value is missing or a number is invalid
    """
    env = os.environ if environ is None else environ

    shop, shop_src = resolve_env(SHOP_DOMAIN_KEYS, required=True, name="Shopify domain", environ=env)
    token, token_src = resolve_env(ADMIN_TOKEN_KEYS, required=True, name="Shopify admin token", environ=env)
    endpoint, endpoint_src = resolve_env(
        [FILES_ENDPOINT_KEY], required=True, name="GHL files endpoint", environ=env
    )
    api_key, api_key_src = resolve_env([FILES_API_KEY_KEY], environ=env)

    api_version, _ = resolve_env([API_VERSION_KEY], environ=env)
    pattern, _ = resolve_env(["PRODUCT_CODE_REGEX"], environ=env)
    template, _ = resolve_env(["PRODUCT_HANDLE_TEMPLATE"], environ=env)

    return SyncSettings(
        shop_domain=shop,
        admin_token=token,
        files_endpoint=endpoint,
        files_api_key=api_key,
        api_version=api_version or DEFAULT_API_VERSION,
        code_pattern=pattern or DEFAULT_CODE_PATTERN,
        handle_template=template or DEFAULT_HANDLE_TEMPLATE,
        dry_run=parse_bool(env.get("DRY_RUN")),
        batch_size=parse_int(env.get("MEDIA_BATCH_SIZE"), DEFAULT_BATCH_SIZE, "MEDIA_BATCH_SIZE"),
        max_retries=parse_int(env.get("MAX_RETRIES"), DEFAULT_MAX_RETRIES, "MAX_RETRIES"),
        shop_domain_source=shop_src,
        admin_token_source=token_src,
        files_endpoint_source=endpoint_src,
        files_api_key_source=api_key_src,
    )
