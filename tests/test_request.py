"""Tests for request line parsing."""

import pytest

from reloadserve.http.request import parse_request_path


class TestParseRequestPath:
    """Test permissive path extraction."""

    def test_simple_get(self):
        assert parse_request_path("GET /index.html HTTP/1.1") == "index.html"
        assert parse_request_path("GET /css/site.css HTTP/1.1") == "css/site.css"

    def test_root(self):
        assert parse_request_path("GET / HTTP/1.1") == ""

    def test_leading_slashes_stripped(self):
        assert parse_request_path("GET ///a/b HTTP/1.1") == "a/b"

    def test_other_methods_pass_through(self):
        """Methods other than GET are not rejected, only left in place."""
        assert parse_request_path("POST /form HTTP/1.1") == "POST /form"
        assert parse_request_path("HEAD /x HTTP/1.1") == "HEAD /x"

    def test_other_versions_pass_through(self):
        assert parse_request_path("GET /x HTTP/1.0") == "x HTTP/1.0"

    def test_query_string_kept(self):
        assert parse_request_path("GET /page.html?v=2 HTTP/1.1") == "page.html?v=2"

    def test_empty_and_garbage(self):
        assert parse_request_path("") == ""
        assert parse_request_path("   ") == ""
        assert parse_request_path("garbage") == "garbage"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
