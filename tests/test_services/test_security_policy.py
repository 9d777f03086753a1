"""Tests for CSP rendering, nonces, redirect checks and input escaping."""

from __future__ import annotations

import logging
import re
from unittest.mock import patch

import pytest
from hypothesis import given
from hypothesis import strategies as st

from newsfront.exceptions import InsecureRandomSourceError
from newsfront.services.security_policy import (
    CSP_POLICY,
    NONCE_PLACEHOLDER,
    SECURITY_HEADERS,
    build_csp,
    build_security_headers,
    csp_policy_for,
    generate_nonce,
    is_valid_redirect_url,
    log_security_event,
    sanitize_input,
    validate_api_endpoint,
)

ALLOWED = ["https://news.example.com"]


class TestBuildCsp:
    def test_nonce_replaces_placeholder_only(self) -> None:
        header = build_csp(nonce="abc123")
        assert "'nonce-abc123'" in header
        assert NONCE_PLACEHOLDER not in header
        without_nonce = build_csp()
        assert header.replace("'nonce-abc123'", NONCE_PLACEHOLDER) == without_nonce

    def test_directives_in_policy_order(self) -> None:
        header = build_csp(nonce="n")
        names = [part.split(" ", 1)[0] for part in header.split("; ")]
        assert names == list(CSP_POLICY)

    def test_valueless_directive(self) -> None:
        header = build_csp({"default-src": ("'self'",), "upgrade-insecure-requests": ()})
        assert header == "default-src 'self'; upgrade-insecure-requests"

    def test_script_src_rendering(self) -> None:
        header = build_csp({"script-src": ("'self'", NONCE_PLACEHOLDER)}, nonce="ff00")
        assert header == "script-src 'self' 'nonce-ff00'"

    def test_endpoint_origin_added_to_connect_src(self) -> None:
        policy = csp_policy_for("https://cms.example.com/graphql")
        assert policy["connect-src"][-1] == "https://cms.example.com"
        assert CSP_POLICY["connect-src"][-1] != "https://cms.example.com"

    def test_missing_endpoint_keeps_default_policy(self) -> None:
        assert csp_policy_for(None) is CSP_POLICY
        assert csp_policy_for("not a url") is CSP_POLICY


class TestNonce:
    def test_default_length_is_hex(self) -> None:
        nonce = generate_nonce()
        assert len(nonce) == 64
        assert re.fullmatch(r"[0-9a-f]+", nonce)

    def test_nonces_differ(self) -> None:
        assert generate_nonce() != generate_nonce()

    def test_custom_length(self) -> None:
        assert len(generate_nonce(16)) == 32

    def test_missing_random_source_raises(self) -> None:
        with (
            patch(
                "newsfront.services.security_policy.secrets.token_bytes",
                side_effect=NotImplementedError,
            ),
            pytest.raises(InsecureRandomSourceError),
        ):
            generate_nonce()


class TestSecurityHeaders:
    def test_fresh_copy(self) -> None:
        headers = build_security_headers()
        headers["X-Frame-Options"] = "SAMEORIGIN"
        assert SECURITY_HEADERS["X-Frame-Options"] == "DENY"

    def test_expected_values(self) -> None:
        headers = build_security_headers()
        assert headers["Strict-Transport-Security"] == (
            "max-age=31536000; includeSubDomains; preload"
        )
        assert headers["X-Content-Type-Options"] == "nosniff"
        assert headers["Referrer-Policy"] == "strict-origin-when-cross-origin"
        assert "Cache-Control" not in headers


class TestRedirectValidation:
    @pytest.mark.parametrize(
        "url",
        [
            "/tech/post-1",
            "tech/post-1",
            "?page=2",
            "https://news.example.com/tech/post-1",
        ],
    )
    def test_allowed(self, url: str) -> None:
        assert is_valid_redirect_url(url, ALLOWED) is True

    @pytest.mark.parametrize(
        "url",
        [
            "https://evil.example/",
            "//evil.example/path",
            "/\\evil.example",
            "\\\\evil.example",
            "http://news.example.com/",
            "javascript:alert(1)",
            "https://news.example.com.evil.example/",
            "http://[::1",
            "",
            "   ",
        ],
    )
    def test_rejected(self, url: str) -> None:
        assert is_valid_redirect_url(url, ALLOWED) is False

    def test_non_string_rejected(self) -> None:
        assert is_valid_redirect_url(None, ALLOWED) is False
        assert is_valid_redirect_url(42, ALLOWED) is False

    def test_empty_allowlist_rejects_everything(self) -> None:
        assert is_valid_redirect_url("/home", []) is False
        assert is_valid_redirect_url("https://news.example.com/", []) is False


class TestSanitizeInput:
    def test_escapes_markup(self) -> None:
        assert sanitize_input("<a href=\"x\">O'Neil & co</a>") == (
            "&lt;a href=&quot;x&quot;&gt;O&#x27;Neil &amp; co&lt;/a&gt;"
        )

    def test_non_string(self) -> None:
        assert sanitize_input(None) == ""
        assert sanitize_input(["<b>"]) == ""

    @given(st.text())
    def test_no_raw_markup_survives(self, text: str) -> None:
        escaped = sanitize_input(text)
        for char in "<>\"'":
            assert char not in escaped

    @given(st.text(alphabet=st.characters(exclude_characters="&<>\"'")))
    def test_plain_text_unchanged(self, text: str) -> None:
        assert sanitize_input(text) == text


class TestValidateApiEndpoint:
    def test_https_endpoint(self) -> None:
        assert validate_api_endpoint("https://cms.example.com/graphql", production=True)

    def test_http_allowed_outside_production(self) -> None:
        assert validate_api_endpoint("http://localhost:8080/graphql")

    @pytest.mark.parametrize(
        "endpoint",
        [
            "http://cms.example.com/graphql",
            "https://localhost/graphql",
            "https://127.0.0.1/graphql",
            "https://[::1]/graphql",
            "https://cms.localhost/graphql",
        ],
    )
    def test_rejected_in_production(self, endpoint: str) -> None:
        assert validate_api_endpoint(endpoint, production=True) is False

    @pytest.mark.parametrize("endpoint", ["not-a-url", "ftp://cms.example.com", "https://"])
    def test_rejected_everywhere(self, endpoint: str) -> None:
        assert validate_api_endpoint(endpoint) is False


class TestLogSecurityEvent:
    def test_redacts_sensitive_fields(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="newsfront.services.security_policy"):
            log_security_event("scan", {"token": "s3cr3t", "path": "/x"}, "low")
        assert "s3cr3t" not in caplog.text
        assert "[REDACTED]" in caplog.text
        assert caplog.records[0].levelno == logging.WARNING

    def test_high_severity_logs_error(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="newsfront.services.security_policy"):
            log_security_event("tamper", {}, "critical")
        assert caplog.records[0].levelno == logging.ERROR
