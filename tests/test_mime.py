"""Tests for content-type lookup."""

import pytest

from reloadserve.http.mime import MIME_TYPES, get_mime_type


class TestMimeLookup:
    """Test extension to content-type mapping."""

    def test_common_types(self):
        """Test a few well known extensions."""
        assert get_mime_type("index.html") == "text/html"
        assert get_mime_type("index.htm") == "text/html"
        assert get_mime_type("app.js") == "text/javascript"
        assert get_mime_type("style.css") == "text/css"
        assert get_mime_type("module.wasm") == "application/wasm"

    def test_every_table_entry(self):
        """Every extension in the table resolves to its own entry."""
        for ext, mime in MIME_TYPES.items():
            assert get_mime_type(f"file.{ext}") == mime

    def test_nested_path_uses_last_suffix(self):
        assert get_mime_type("assets/archive.tar.gz") == "application/gzip"
        assert get_mime_type("v1.2/readme.txt") == "text/plain"

    def test_case_insensitive(self):
        """Upper-case extensions map like their lower-case forms."""
        assert get_mime_type("PHOTO.JPG") == "image/jpeg"
        assert get_mime_type("PAGE.HTML") == "text/html"
        assert get_mime_type("Script.Js") == "text/javascript"

    def test_unknown_or_missing_extension(self):
        """Unknown extensions yield no content type rather than a default."""
        assert get_mime_type("notes.unknownext") is None
        assert get_mime_type("Makefile") is None
        assert get_mime_type("dir.d/Makefile") is None
        assert get_mime_type(".bashrc") is None
        assert get_mime_type("") is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
