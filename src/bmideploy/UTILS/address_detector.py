"""
Detection of the host's public address through a chain of best-effort lookups.
"""
from typing import Callable, List, Optional, Tuple
from urllib.request import urlopen, Request
from http.client import HTTPException
from urllib.error import URLError

METADATA_ROOT = "http://169.254.169.254/latest"
TOKEN_URL = f"{METADATA_ROOT}/api/token"
PUBLIC_IPV4_URL = f"{METADATA_ROOT}/meta-data/public-ipv4"
TOKEN_TTL_HEADER = "X-aws-ec2-metadata-token-ttl-seconds"
TOKEN_HEADER = "X-aws-ec2-metadata-token"
ECHO_SERVICES = ["https://ifconfig.me", "https://icanhazip.com"]
FALLBACK_ADDRESS = "localhost"


class PublicAddressDetector:
    """
    Resolves the public address of the host.

    Lookups are tried in order: the token-based metadata query, the legacy
    metadata query, external IP-echo services, and finally ``localhost``.
    A failed or empty lookup falls through to the next one.
    """

    def __init__(self, timeout: float = 2.0, opener: Optional[Callable] = None):
        """
        Args:
            timeout: Seconds allowed for each individual request.
            opener: Callable with the ``urlopen(request, timeout=...)`` signature.
        """
        self.timeout = timeout
        self.opener = opener or urlopen

    def _fetch(self, request: Request) -> str:
        """Performs a request, returning the stripped body or '' on any failure."""
        try:
            with self.opener(request, timeout=self.timeout) as response:
                return response.read().decode("utf-8", errors="replace").strip()
        except (URLError, HTTPException, OSError, ValueError):
            return ""

    def from_metadata_token(self) -> str:
        token = self._fetch(
            Request(TOKEN_URL, method="PUT", headers={TOKEN_TTL_HEADER: "21600"})
        )
        if not token:
            return ""
        return self._fetch(Request(PUBLIC_IPV4_URL, headers={TOKEN_HEADER: token}))

    def from_metadata_legacy(self) -> str:
        return self._fetch(Request(PUBLIC_IPV4_URL))

    def from_echo_services(self) -> str:
        for url in ECHO_SERVICES:
            body = self._fetch(Request(url, headers={"User-Agent": "curl/8"}))
            if body:
                return body.splitlines()[0].strip()
        return ""

    def lookups(self) -> List[Tuple[str, Callable[[], str]]]:
        return [
            ("metadata-token", self.from_metadata_token),
            ("metadata-legacy", self.from_metadata_legacy),
            ("echo-service", self.from_echo_services),
        ]

    def detect(self) -> str:
        """
        Returns the first non-empty lookup result, or ``localhost``.
        """
        for _, lookup in self.lookups():
            address = lookup()
            if address:
                return address
        return FALLBACK_ADDRESS
