"""Tests for product code extraction and handle derivation."""

import re

import pytest

from mediasync.codes import compile_code_pattern, derive_handle, extract_code


class TestExtractCode:
    @pytest.mark.parametrize("text,expected", [
        ("CS1_front.jpg", "CS1"),
        ("cs42-side.png", "CS42"),
        ("CS007.mp4", "CS007"),
    ])
    def test_matches_are_uppercased(self, text, expected):
        assert extract_code(text) == expected

    @pytest.mark.parametrize("text", ["widget.png", "front_CS1.jpg", "CS_1.jpg", "", None])
    def test_no_match_returns_none(self, text):
        assert extract_code(text) is None

    def test_custom_pattern_string(self):
        assert extract_code("photo-sku-77.jpg", r"SKU-\d+") == "SKU-77"

    def test_precompiled_pattern(self):
        pattern = re.compile(r"AB\d{2}", re.IGNORECASE)

        assert extract_code("xx_ab123", pattern) == "AB12"

    def test_first_match_wins(self):
        assert extract_code("CS1 and CS2", r"CS\d+") == "CS1"


class TestCompileCodePattern:
    def test_is_case_insensitive(self):
        assert compile_code_pattern(r"^CS\d+").flags & re.IGNORECASE

    def test_invalid_pattern_falls_back_to_default(self):
        pattern = compile_code_pattern("([unclosed")

        assert pattern.pattern == r"^CS\d+"

    def test_empty_pattern_uses_default(self):
        assert compile_code_pattern("").pattern == r"^CS\d+"


class TestDeriveHandle:
    def test_default_template_is_lowercase_code(self):
        assert derive_handle("CS12") == "cs12"

    def test_all_placeholders(self):
        template = "${codeLower}/${codeUpper}/${codeNum}"

        assert derive_handle("Cs12", template) == "cs12/CS12/12"

    def test_placeholders_repeat(self):
        assert derive_handle("CS3", "p-${codeNum}-${codeNum}") == "p-3-3"

    def test_code_without_digits(self):
        assert derive_handle("ABC", "item-${codeNum}") == "item-"

    def test_is_deterministic(self):
        assert derive_handle("CS9", "x-${codeUpper}") == derive_handle("CS9", "x-${codeUpper}")
