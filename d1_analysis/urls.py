"""
Website address helpers: normalisation and domain verification
"""
import asyncio
import re
import socket
from dataclasses import dataclass, field
from typing import List, Optional
from urllib.parse import urlparse

from core.logging import get_logger
from d0_gateway.providers.website import WebsiteClient

from .exceptions import InvalidURLError

logger = get_logger(__name__, domain="d1")

_SCHEME = re.compile(r"^https?://", re.IGNORECASE)


def normalize_url(website: str) -> str:
    """
    Turn user input into an absolute http(s) URL

    A missing scheme defaults to https. The host must look like a domain name
    (at least one dot, no whitespace).

    Raises:
        InvalidURLError: when the input is empty or has no usable host
    """
    website = (website or "").strip()
    if not website:
        raise InvalidURLError(website, "Missing website URL")

    if not _SCHEME.match(website):
        website = f"https://{website}"

    try:
        host = urlparse(website).hostname
    except ValueError as e:
        raise InvalidURLError(website) from e

    if not host or len(host.split(".")) < 2 or re.search(r"\s", host):
        raise InvalidURLError(website, "Invalid domain name")
    return website


@dataclass
class DomainVerification:
    hostname: str
    dns_resolved: bool
    http_reachable: bool
    addresses: List[str] = field(default_factory=list)

    def to_dict(self):
        return {
            "ok": self.dns_resolved,
            "hostname": self.hostname,
            "dns_resolved": self.dns_resolved,
            "http_reachable": self.http_reachable,
            "addresses": list(self.addresses),
        }


async def resolve_host(hostname: str) -> List[str]:
    """Resolved addresses in lookup order without duplicates, empty when the lookup fails"""
    try:
        infos = await asyncio.to_thread(socket.getaddrinfo, hostname, None)
    except (socket.gaierror, UnicodeError) as e:
        logger.info(f"DNS lookup for {hostname} failed: {e}")
        return []

    addresses: List[str] = []
    for info in infos:
        address = info[4][0]
        if address not in addresses:
            addresses.append(address)
    return addresses


async def verify_domain(website: str, client: Optional[WebsiteClient] = None, max_addresses: int = 5) -> DomainVerification:
    """
    Check that a website's domain resolves and answers over HTTP

    The HTTP probe is best effort: any status below 500 counts as reachable.
    """
    url = normalize_url(website)
    parsed = urlparse(url)
    hostname = parsed.hostname

    addresses = await resolve_host(hostname)
    if not addresses:
        return DomainVerification(hostname=hostname, dns_resolved=False, http_reachable=False)

    website_client = client or WebsiteClient()
    try:
        response = await website_client.fetch_resource(f"{parsed.scheme}://{parsed.netloc}")
    finally:
        if client is None:
            await website_client.close()

    return DomainVerification(
        hostname=hostname,
        dns_resolved=True,
        http_reachable=response is not None and response.status_code < 500,
        addresses=addresses[:max_addresses],
    )
