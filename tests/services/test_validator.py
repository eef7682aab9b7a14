"""Tests for URL validation."""

import asyncio
import socket

import pytest

from app.core.config import Settings
from app.services.validator import AcceptAllResolver, DNSResolver, URLValidator
from tests.utils import FakeResolver, UNRESOLVABLE_HOST


@pytest.mark.service
class TestURLValidator:

    @pytest.mark.parametrize("url", [
        "https://www.freecodecamp.org",
        "http://example.com/path?q=1#frag",
        "https://sub.example.co.uk:8443/a/b",
    ])
    def test_well_formed(self, url):
        assert URLValidator.is_well_formed(url) is True

    @pytest.mark.parametrize("url", [
        None,
        "",
        "   ",
        "www.example.com",
        "example.com/path",
        "ftp:/bad-url",
        "https://",
        "not a url",
        42,
    ])
    def test_not_well_formed(self, url):
        assert URLValidator.is_well_formed(url) is False

    @pytest.mark.asyncio
    async def test_validate_resolves_hostname(self, url_validator, fake_resolver):
        assert await url_validator.validate("https://www.freecodecamp.org/news") is True
        assert fake_resolver.lookups == ["www.freecodecamp.org"]

    @pytest.mark.asyncio
    async def test_validate_unresolvable_hostname(self, url_validator):
        assert await url_validator.validate(f"https://{UNRESOLVABLE_HOST}/page") is False

    @pytest.mark.asyncio
    async def test_malformed_url_skips_lookup(self, url_validator, fake_resolver):
        assert await url_validator.validate("ftp:/bad-url") is False
        assert fake_resolver.lookups == []

    def test_from_settings_disabled_dns(self):
        validator = URLValidator.from_settings(Settings(DNS_VALIDATION_ENABLED=False))
        assert isinstance(validator.resolver, AcceptAllResolver)

    def test_from_settings_dns_timeout(self):
        validator = URLValidator.from_settings(
            Settings(DNS_VALIDATION_ENABLED=True, DNS_LOOKUP_TIMEOUT=1.5)
        )
        assert isinstance(validator.resolver, DNSResolver)
        assert validator.resolver.timeout == 1.5

    def test_default_resolver_is_dns(self):
        assert isinstance(URLValidator().resolver, DNSResolver)


@pytest.mark.service
class TestDNSResolver:

    @pytest.mark.asyncio
    async def test_resolves(self, monkeypatch):
        loop = asyncio.get_running_loop()

        async def fake_getaddrinfo(host, port, *args, **kwargs):
            return [(socket.AF_INET, socket.SOCK_STREAM, 6, "", ("93.184.216.34", 0))]

        monkeypatch.setattr(loop, "getaddrinfo", fake_getaddrinfo)

        assert await DNSResolver().resolve("example.com") is True

    @pytest.mark.asyncio
    async def test_lookup_failure(self, monkeypatch):
        loop = asyncio.get_running_loop()

        async def failing_getaddrinfo(host, port, *args, **kwargs):
            raise socket.gaierror(socket.EAI_NONAME, "Name or service not known")

        monkeypatch.setattr(loop, "getaddrinfo", failing_getaddrinfo)

        assert await DNSResolver().resolve("no-such-host.example") is False

    @pytest.mark.asyncio
    async def test_lookup_timeout(self, monkeypatch):
        loop = asyncio.get_running_loop()

        async def slow_getaddrinfo(host, port, *args, **kwargs):
            await asyncio.sleep(10)

        monkeypatch.setattr(loop, "getaddrinfo", slow_getaddrinfo)

        assert await DNSResolver(timeout=0.05).resolve("slow.example") is False

    @pytest.mark.asyncio
    async def test_invalid_hostname(self, monkeypatch):
        loop = asyncio.get_running_loop()

        async def idna_failure(host, port, *args, **kwargs):
            raise UnicodeError("label too long")

        monkeypatch.setattr(loop, "getaddrinfo", idna_failure)

        assert await DNSResolver().resolve("a" * 70 + ".com") is False
