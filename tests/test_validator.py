"""Tests for URL validation."""

from __future__ import annotations

import pytest

from doclens.errors import ErrorKind, Failure
from doclens.scraper.validator import validate_url


class TestValidateUrl:
    @pytest.mark.parametrize(
        "url",
        [
            "https://example.com/docs",
            "http://example.com",
            "HTTPS://Example.com/path?q=1#frag",
            "http://localhost:8080/index.html",
        ],
    )
    def test_accepts_http_and_https(self, url: str) -> None:
        assert validate_url(url) == url

    def test_strips_surrounding_whitespace(self) -> None:
        assert validate_url("  https://example.com/a  ") == "https://example.com/a"

    @pytest.mark.parametrize(
        "url",
        [
            "ftp://example.com/file",
            "file:///etc/passwd",
            "javascript:alert(1)",
            "mailto:someone@example.com",
            "data:text/html,hello",
        ],
    )
    def test_rejects_other_schemes(self, url: str) -> None:
        result = validate_url(url)
        assert isinstance(result, Failure)
        assert result.kind is ErrorKind.VALIDATION
        assert result.status == 400

    @pytest.mark.parametrize(
        "url",
        ["", "   ", "not a url", "example.com/docs", "/relative/path", "https://", "http://:80"],
    )
    def test_rejects_malformed(self, url: str) -> None:
        result = validate_url(url)
        assert isinstance(result, Failure)
        assert result.kind is ErrorKind.VALIDATION

    def test_rejects_bad_port(self) -> None:
        result = validate_url("http://example.com:99999/")
        assert isinstance(result, Failure)
        assert "Invalid URL format" in result.details

    @pytest.mark.parametrize("value", [None, 42, ["https://example.com"]])
    def test_rejects_non_strings(self, value: object) -> None:
        result = validate_url(value)
        assert isinstance(result, Failure)
        assert result.kind is ErrorKind.VALIDATION

    def test_reason_names_the_scheme(self) -> None:
        result = validate_url("ftp://example.com/file")
        assert isinstance(result, Failure)
        assert "ftp" in result.details

    @pytest.mark.parametrize(
        "url",
        [
            "http://127.0.0.1:8000/",
            "http://[::1]/docs",
            "https://docs.example.com./guide",
            "https://bücher.example/",
            "https://my_host.internal/",
        ],
    )
    def test_accepts_ip_and_dns_hosts(self, url: str) -> None:
        assert validate_url(url) == url

    @pytest.mark.parametrize(
        "url",
        [
            "http://exa<mple>.com/",
            "https://exa|mple.com/",
            "http://exa%20mple.com",
            "http://exa%3Cmple.com/",
            'http://exa"mple.com/',
            "http://exa{mple}.com/",
            "http://-leading.example/",
            "http://trailing-.example/",
            "http://a..b/",
            "http://" + "a" * 64 + ".com/",
        ],
    )
    def test_rejects_forbidden_host_characters(self, url: str) -> None:
        result = validate_url(url)
        assert isinstance(result, Failure)
        assert result.kind is ErrorKind.VALIDATION
        assert result.status == 400
        assert "invalid host" in result.details
