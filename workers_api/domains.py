"""Custom domain resolution and attachment"""

import logging
from dataclasses import dataclass
from typing import Optional

import tldextract

from errors import DomainError
from settings import TLD_CACHE_DIR
from .api_client import CloudflareClient
from .errors import CloudflareAPIError

logger = logging.getLogger(__name__)

PRODUCTION_ENVIRONMENT = "production"


@dataclass(frozen=True)
class DomainBinding:
    """Outcome of attaching a custom hostname to a worker

    Attributes:
        registrable_domain: e.g. ``example.co.uk`` for ``app.example.co.uk``
        zone_id: Cloudflare zone matching the registrable domain
        zone_name: Name of that zone
        hostname: Hostname reported back by the attach call
    """
    registrable_domain: str
    zone_id: str
    zone_name: str
    hostname: str


def make_extractor(cache_dir: str = TLD_CACHE_DIR, offline: bool = False) -> tldextract.TLDExtract:
    """Create a public-suffix extractor backed by a local cache

    Args:
        cache_dir: Where the downloaded suffix list is cached
        offline: Never fetch the list, use the snapshot bundled with tldextract
    """
    kwargs = {"cache_dir": cache_dir, "fallback_to_snapshot": True}
    if offline:
        kwargs["suffix_list_urls"] = ()
    return tldextract.TLDExtract(**kwargs)


def registrable_domain(hostname: str, extractor: Optional[tldextract.TLDExtract] = None) -> str:
    """Resolve a hostname to its registrable domain

    ``sub.example.co.uk`` -> ``example.co.uk``, ``example.com`` -> ``example.com``.

    Raises:
        DomainError: If the hostname has no label below a public suffix
    """
    extractor = extractor or make_extractor()
    cleaned = hostname.strip().lower().rstrip(".")
    result = extractor(cleaned)
    if not result.domain or not result.suffix:
        raise DomainError(f"'{hostname}' is not a domain that can be registered")
    return f"{result.domain}.{result.suffix}"


class DomainBinder:
    """Attaches a custom hostname to a deployed worker"""

    def __init__(
        self,
        client: CloudflareClient,
        account_id: str,
        extractor: Optional[tldextract.TLDExtract] = None,
    ):
        self.client = client
        self.account_id = account_id
        self.extractor = extractor

    async def attach(self, script_name: str, hostname: str) -> DomainBinding:
        """Find the zone for ``hostname`` and route it to ``script_name``

        Raises:
            DomainError: If no zone matches or the attach call fails
        """
        domain = registrable_domain(hostname, self.extractor)
        logger.info(f"Resolved {hostname} to registrable domain {domain}")

        try:
            zones = await self.client.list_zones(self.account_id, name=domain)
        except CloudflareAPIError as e:
            raise DomainError(f"Could not list zones for {domain}: {e}") from e

        zone = next((z for z in zones if z.name == domain), None)
        if zone is None:
            raise DomainError(f"No zone found for domain: {domain}")

        try:
            attached = await self.client.attach_worker_domain(
                self.account_id,
                hostname=hostname,
                service=script_name,
                zone_id=zone.id,
                environment=PRODUCTION_ENVIRONMENT,
            )
        except CloudflareAPIError as e:
            raise DomainError(f"Could not attach {hostname} to worker '{script_name}': {e}") from e

        return DomainBinding(
            registrable_domain=domain,
            zone_id=zone.id,
            zone_name=zone.name,
            hostname=attached.hostname,
        )
