"""Product code extraction and handle derivation."""

import re
from typing import Optional, Pattern, Union

from mediasync.config import DEFAULT_CODE_PATTERN, DEFAULT_HANDLE_TEMPLATE
from mediasync.logging_config import get_logger

__all__ = [
    "compile_code_pattern",
    "extract_code",
    "derive_handle",
]

logger = get_logger("codes")

_DEFAULT_PATTERN = re.compile(DEFAULT_CODE_PATTERN, re.IGNORECASE)


def compile_code_pattern(pattern: Optional[str]) -> Pattern[str]:
    """Compile a code pattern case-insensitively.

    An empty or invalid pattern falls back to the default ``^CS\\d+``.
    """
    if not pattern:
        return _DEFAULT_PATTERN
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as e:
        logger.warning(f"Invalid code pattern {pattern!r} ({e}); using {DEFAULT_CODE_PATTERN}")
        return _DEFAULT_PATTERN


def extract_code(text: Optional[str], pattern: Union[str, Pattern[str], None] = None) -> Optional[str]:
    """Return the first pattern match in text, uppercased, or None.

    Examples:
        >>> extract_code("cs12_front.jpg")
        'CS12'
        >>> extract_code("widget.png") is None
        True
    """
    if isinstance(pattern, str) or pattern is None:
        pattern = compile_code_pattern(pattern)
    match = pattern.search(str(text or ""))
    return match.group(0).upper() if match else None


def derive_handle(code: str, template: str = DEFAULT_HANDLE_TEMPLATE) -> str:
    """Substitute ${codeLower}, ${codeUpper} and ${codeNum} into a handle template."""
    code_num = re.sub(r"\D+", "", code)
    return (
        (template or DEFAULT_HANDLE_TEMPLATE)
        .replace("${codeLower}", code.lower())
        .replace("${codeUpper}", code.upper())
        .replace("${codeNum}", code_num)
    )
