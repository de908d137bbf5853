"""Tests for the filename sanitizer."""

from __future__ import annotations

import re
from concurrent.futures import ThreadPoolExecutor

import pytest

from domain.services.filename_sanitizer import FilenameSanitizer, sanitize, unique_token

SAFE_NAME = re.compile(r"^[A-Za-z0-9\u4e00-\u9fa5._-]+$")


class TestFilenameSanitizer:
    """Test FilenameSanitizer."""

    def test_prefix_base_token_and_extension(self, fixed_sanitizer) -> None:
        """Test the shape of a sanitized name."""
        result = fixed_sanitizer.sanitize("Sales Contract.docx", "template")
        assert result == "template-Sales-Contract-1700000000000-abcd1234.docx"

    def test_extension_is_lower_cased(self, fixed_sanitizer) -> None:
        result = fixed_sanitizer.sanitize("REPORT.PDF", "template")
        assert result.endswith(".pdf")

    def test_unrecognized_extension_is_dropped(self, fixed_sanitizer) -> None:
        result = fixed_sanitizer.sanitize("payload.exe", "template")
        assert result == "template-payload-1700000000000-abcd1234"

    @pytest.mark.parametrize(
        "original_name",
        [
            "../../etc/passwd",
            "..\\..\\windows\\system32\\evil.docx",
            "dir/sub/contract.docx",
            "bad\x00name\x1f.pdf",
            "tab\tnew\nline.doc",
            "/absolute/path.pdf",
        ],
    )
    def test_output_has_no_separators_or_control_chars(self, original_name: str) -> None:
        """Test that path separators and control characters never survive."""
        result = sanitize(original_name, "template")
        assert "/" not in result
        assert "\\" not in result
        assert not any(ord(ch) < 32 for ch in result)
        assert SAFE_NAME.match(result)

    def test_only_last_path_segment_is_used(self, fixed_sanitizer) -> None:
        result = fixed_sanitizer.sanitize("../../secret/contract.docx", "template")
        assert result == "template-contract-1700000000000-abcd1234.docx"

    def test_chinese_characters_are_kept(self, fixed_sanitizer) -> None:
        result = fixed_sanitizer.sanitize("销售合同 v2.docx", "template")
        assert result == "template-销售合同-v2-1700000000000-abcd1234.docx"

    def test_chinese_only_name_is_not_lost(self, fixed_sanitizer) -> None:
        result = fixed_sanitizer.sanitize("采购合同.docx", "template")
        assert result == "template-采购合同-1700000000000-abcd1234.docx"

    def test_other_non_ascii_characters_are_replaced(self, fixed_sanitizer) -> None:
        result = fixed_sanitizer.sanitize("Prüfbericht.pdf", "template")
        assert result == "template-Pr-fbericht-1700000000000-abcd1234.pdf"
        assert SAFE_NAME.match(result)

    @pytest.mark.parametrize("original_name", ["", None, "   ", "###", ".docx"])
    def test_empty_or_invalid_name_falls_back(self, fixed_sanitizer, original_name) -> None:
        """Test that unusable input degrades to the fallback base name."""
        result = fixed_sanitizer.sanitize(original_name, "template")
        assert result.startswith("template-")
        assert "1700000000000-abcd1234" in result
        assert SAFE_NAME.match(result)

    def test_fallback_base_name_for_blank_input(self, fixed_sanitizer) -> None:
        assert fixed_sanitizer.sanitize("", "template") == "template-file-1700000000000-abcd1234"

    def test_missing_prefix_is_omitted(self, fixed_sanitizer) -> None:
        assert fixed_sanitizer.sanitize("a.pdf") == "a-1700000000000-abcd1234.pdf"

    def test_long_base_name_is_truncated(self, fixed_sanitizer) -> None:
        result = fixed_sanitizer.sanitize("x" * 300 + ".docx", "template")
        assert result == f"template-{'x' * 50}-1700000000000-abcd1234.docx"

    def test_identical_inputs_do_not_collide(self) -> None:
        assert sanitize("contract.docx", "template") != sanitize("contract.docx", "template")

    def test_concurrent_calls_do_not_collide(self) -> None:
        """Test uniqueness under concurrent invocation."""
        sanitizer = FilenameSanitizer()
        with ThreadPoolExecutor(max_workers=16) as pool:
            names = list(
                pool.map(lambda _: sanitizer.sanitize("contract.docx", "template"), range(500)),
            )
        assert len(set(names)) == len(names)

    def test_unsafe_token_is_cleaned(self) -> None:
        sanitizer = FilenameSanitizer(token_factory=lambda: "a/b c")
        assert sanitizer.sanitize("x.pdf", "template") == "template-x-a-b-c.pdf"


class TestUniqueToken:
    def test_token_format(self) -> None:
        assert re.fullmatch(r"\d+-[0-9a-f]{8}", unique_token())
