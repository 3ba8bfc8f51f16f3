# =============================================================================
# tests/test_utils.py - Shared Helper Tests
# =============================================================================
# Unit tests for lib/utils.py: slugs, storage file names, text and dates.
#
# Run with: pytest tests/test_utils.py -v
# =============================================================================

import re
from datetime import datetime, timezone

from lib.utils import (
    build_upload_path,
    clean_optional,
    create_slug,
    normalize_multiline,
    parse_timestamp,
    sanitize_file_stem,
    sanitize_string_list,
    split_filename,
    subtract_months,
)


class TestCreateSlug:

    def test_lowercases_and_joins_words(self):
        assert create_slug("Hochzeit in den Alpen!") == "hochzeit-in-den-alpen"

    def test_keeps_umlauts(self):
        assert create_slug("Saint Antönien") == "saint-antönien"
        assert create_slug("Große Straße") == "große-straße"

    def test_collapses_whitespace_and_dashes(self):
        assert create_slug("  a   --  b  ") == "a-b"

    def test_only_symbols_gives_empty_slug(self):
        assert create_slug("!!!") == ""


class TestFileNames:

    def test_sanitize_replaces_disallowed_characters(self):
        assert sanitize_file_stem("My Photo (1)") == "my-photo-1"

    def test_sanitize_umlauts_only_when_allowed(self):
        assert sanitize_file_stem("Grüße") == "gr-e"
        assert sanitize_file_stem("Grüße", allow_umlauts=True) == "grüße"

    def test_split_filename(self):
        assert split_filename("Sunset.Final.JPG") == ("Sunset.Final", "jpg")
        assert split_filename("noext") == ("", "webp")
        assert split_filename("noext", default_ext="png") == ("", "png")

    def test_build_upload_path_format(self):
        path = build_upload_path("user-1", "My Photo.JPG", "gallery")
        assert re.fullmatch(r"user-1/my-photo-\d{17}-[a-z0-9]{6}\.jpg", path)

    def test_build_upload_path_uses_fallback_stem(self):
        path = build_upload_path("folder", "???.png", "gallery")
        assert path.startswith("folder/gallery-")
        assert path.endswith(".png")


class TestTextHelpers:

    def test_normalize_multiline(self):
        assert normalize_multiline(" eins \n\n zwei\n  ") == ["eins", "zwei"]
        assert normalize_multiline(None) == []

    def test_sanitize_string_list(self):
        assert sanitize_string_list([" a ", "", 3, None, "b"]) == ["a", "b"]
        assert sanitize_string_list("not a list") == []

    def test_clean_optional(self):
        assert clean_optional("  text ") == "text"
        assert clean_optional("   ") is None
        assert clean_optional(None) is None


class TestDates:

    def test_subtract_months_simple(self):
        value = datetime(2026, 10, 16, 12, 0, tzinfo=timezone.utc)
        assert subtract_months(value, 12) == datetime(2025, 10, 16, 12, 0, tzinfo=timezone.utc)

    def test_subtract_months_clamps_day(self):
        value = datetime(2026, 3, 31, tzinfo=timezone.utc)
        assert subtract_months(value, 1) == datetime(2026, 2, 28, tzinfo=timezone.utc)

    def test_subtract_months_leap_year(self):
        value = datetime(2024, 3, 31, tzinfo=timezone.utc)
        assert subtract_months(value, 1).day == 29

    def test_subtract_months_across_year(self):
        value = datetime(2026, 1, 15, tzinfo=timezone.utc)
        assert subtract_months(value, 2) == datetime(2025, 11, 15, tzinfo=timezone.utc)

    def test_parse_timestamp(self):
        parsed = parse_timestamp("2026-01-02T03:04:05Z")
        assert parsed == datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        assert parse_timestamp("2026-01-02T03:04:05").tzinfo == timezone.utc
        assert parse_timestamp("garbage") is None
        assert parse_timestamp(None) is None
