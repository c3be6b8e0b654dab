import pytest

from errors import DomainError
from workers_api import DomainBinder, Zone, registrable_domain

from support import api_error


@pytest.mark.parametrize(
    "hostname, expected",
    [
        ("sub.example.co.uk", "example.co.uk"),
        ("example.com", "example.com"),
        ("a.b.example.com", "example.com"),
        ("App.Example.COM.", "example.com"),
    ],
)
def test_registrable_domain(extractor, hostname, expected):
    assert registrable_domain(hostname, extractor) == expected


@pytest.mark.parametrize("hostname", ["co.uk", "com", "", "192.168.1.1"])
def test_hostname_without_registrable_domain(extractor, hostname):
    with pytest.raises(DomainError):
        registrable_domain(hostname, extractor)


@pytest.mark.asyncio
async def test_attach_uses_exact_zone_match_and_production_environment(fake_client, extractor):
    fake_client.zones = [Zone(id="zone-1", name="example.com")]
    binder = DomainBinder(fake_client, "acct-1", extractor=extractor)

    binding = await binder.attach("demo", "app.example.com")

    assert binding.registrable_domain == "example.com"
    assert binding.zone_id == "zone-1"
    assert binding.hostname == "app.example.com"
    assert ("list_zones", "acct-1", "example.com") in fake_client.calls
    assert fake_client.calls[-1] == (
        "attach_worker_domain", "acct-1", "app.example.com", "demo", "zone-1", "production",
    )


@pytest.mark.asyncio
async def test_no_matching_zone_names_the_domain(fake_client, extractor):
    fake_client.zones = [Zone(id="zone-2", name="other.com")]
    binder = DomainBinder(fake_client, "acct-1", extractor=extractor)

    with pytest.raises(DomainError) as excinfo:
        await binder.attach("demo", "app.example.com")

    assert "example.com" in str(excinfo.value)
    assert "attach_worker_domain" not in fake_client.call_names()


@pytest.mark.asyncio
async def test_attach_api_failure_is_domain_error(fake_client, extractor):
    fake_client.zones = [Zone(id="zone-1", name="example.com")]
    fake_client.fail("attach_worker_domain", api_error(409, 100117, "hostname already has externally managed DNS records"))
    binder = DomainBinder(fake_client, "acct-1", extractor=extractor)

    with pytest.raises(DomainError):
        await binder.attach("demo", "app.example.com")
