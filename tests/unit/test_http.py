"""Tests for TLS configuration of source HTTP clients."""

from __future__ import annotations

import ssl

import httpx
import pytest

from fileforge.core.errors import InvalidTLSVersionError
from fileforge.core.http import HttpClientFactory, build_ssl_context, min_tls_version


class TestMinTlsVersion:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("", ssl.TLSVersion.TLSv1_3),
            ("1.0", ssl.TLSVersion.TLSv1),
            ("1.1", ssl.TLSVersion.TLSv1_1),
            ("1.2", ssl.TLSVersion.TLSv1_2),
            ("1.3", ssl.TLSVersion.TLSv1_3),
        ],
    )
    def test_supported(self, value: str, expected: ssl.TLSVersion):
        assert min_tls_version(value) is expected

    def test_unsupported(self):
        with pytest.raises(InvalidTLSVersionError, match="1.4"):
            min_tls_version("1.4")


class TestSslContext:
    def test_verifies_by_default(self):
        context = build_ssl_context("1.2")
        assert context.verify_mode == ssl.CERT_REQUIRED
        assert context.check_hostname is True
        assert context.minimum_version == ssl.TLSVersion.TLSv1_2

    def test_insecure_skips_verification(self):
        context = build_ssl_context(insecure=True)
        assert context.verify_mode == ssl.CERT_NONE
        assert context.check_hostname is False


class TestHttpClientFactory:
    def test_invalid_default_rejected(self):
        with pytest.raises(InvalidTLSVersionError):
            HttpClientFactory("tls9")

    def test_client(self):
        with HttpClientFactory("1.2").client() as client:
            assert isinstance(client, httpx.Client)

    def test_custom_transport(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, content=b"ok"))
        with HttpClientFactory(transport=transport).client() as client:
            assert client.get("https://example.test/x").content == b"ok"
