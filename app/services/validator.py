"""URL validation for submitted URLs.

A URL is accepted when it is a well-formed absolute URL with an explicit
scheme and its hostname resolves. Hostname resolution goes through a
``HostResolver`` so that it can be replaced in tests or switched off.
"""

import asyncio
import logging
from typing import Optional, Protocol
from urllib.parse import urlsplit

import validators

logger = logging.getLogger(__name__)


class HostResolver(Protocol):
    """Anything that can tell whether a hostname exists."""

    async def resolve(self, hostname: str) -> bool:
        ...


class DNSResolver:
    """Resolve hostnames with the event loop's getaddrinfo, bounded by a timeout."""

    def __init__(self, timeout: float = 5.0):
        self.timeout = timeout

    async def resolve(self, hostname: str) -> bool:
        loop = asyncio.get_running_loop()
        try:
            await asyncio.wait_for(loop.getaddrinfo(hostname, None), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.info(f"DNS lookup timed out after {self.timeout}s for {hostname}")
            return False
        except (OSError, UnicodeError) as e:
            logger.info(f"DNS lookup failed for {hostname}: {e}")
            return False
        return True


class AcceptAllResolver:
    """Resolver used when DNS validation is disabled."""

    async def resolve(self, hostname: str) -> bool:
        return True


class URLValidator:
    """
    Syntactic and existence check for submitted URLs.

    Args:
        resolver: Hostname resolver; defaults to a DNSResolver
    """

    def __init__(self, resolver: Optional[HostResolver] = None):
        self.resolver = resolver or DNSResolver()

    @classmethod
    def from_settings(cls, settings) -> "URLValidator":
        if not settings.DNS_VALIDATION_ENABLED:
            return cls(AcceptAllResolver())
        return cls(DNSResolver(timeout=settings.DNS_LOOKUP_TIMEOUT))

    @staticmethod
    def is_well_formed(url) -> bool:
        """True for a non-empty absolute URL carrying an explicit scheme."""
        if not isinstance(url, str) or not url.strip():
            return False
        # validators.url returns a falsy ValidationError instead of raising
        return bool(validators.url(url))

    @staticmethod
    def extract_hostname(url: str) -> Optional[str]:
        try:
            return urlsplit(url).hostname
        except ValueError:
            return None

    async def validate(self, url) -> bool:
        """Return True when ``url`` is well formed and its host resolves."""
        if not self.is_well_formed(url):
            return False

        hostname = self.extract_hostname(url)
        if not hostname:
            return False

        return await self.resolver.resolve(hostname)
