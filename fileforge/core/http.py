"""HTTP clients for downloading sources and reading their metadata.

Every client carries an ``ssl.SSLContext`` with the requested minimum TLS
version; ``insecure`` disables certificate and hostname verification.
"""

from __future__ import annotations

import ssl

import httpx

from fileforge.core.errors import InvalidTLSVersionError

_TLS_VERSIONS: dict[str, ssl.TLSVersion] = {
    "": ssl.TLSVersion.TLSv1_3,
    "1.0": ssl.TLSVersion.TLSv1,
    "1.1": ssl.TLSVersion.TLSv1_1,
    "1.2": ssl.TLSVersion.TLSv1_2,
    "1.3": ssl.TLSVersion.TLSv1_3,
}


def min_tls_version(value: str) -> ssl.TLSVersion:
    """Map ``""``/``"1.0"``..``"1.3"`` to an ``ssl.TLSVersion``."""
    try:
        return _TLS_VERSIONS[value.strip()]
    except KeyError:
        raise InvalidTLSVersionError(
            f"unsupported minimal TLS version: {value!r}, "
            f"supported values are: 1.0, 1.1, 1.2, 1.3"
        ) from None


def build_ssl_context(min_tls: str = "", insecure: bool = False) -> ssl.SSLContext:
    context = ssl.create_default_context()
    context.minimum_version = min_tls_version(min_tls)
    if insecure:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


class HttpClientFactory:
    """Builds ``httpx.Client`` instances for source URLs.

    Parameters
    ----------
    default_min_tls:
        Minimum TLS version used when a source does not request one.
    transport:
        Optional custom transport (e.g. ``httpx.MockTransport`` in tests).
    """

    def __init__(
        self,
        default_min_tls: str = "",
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        # Validate early so a bad default fails at construction time.
        min_tls_version(default_min_tls)
        self._default_min_tls = default_min_tls
        self._transport = transport

    def client(self, *, min_tls: str = "", insecure: bool = False) -> httpx.Client:
        """Return a new client honoring *min_tls* and *insecure*."""
        context = build_ssl_context(min_tls or self._default_min_tls, insecure)
        return httpx.Client(
            verify=context,
            follow_redirects=True,
            transport=self._transport,
        )
