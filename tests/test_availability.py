import pytest

from provisioning import NameAvailability, check_name_availability
from workers_api import CloudflareAPIError

from support import api_error


@pytest.mark.asyncio
async def test_existing_script_is_taken(deploy_ctx, fake_client):
    assert await check_name_availability(deploy_ctx, "demo") is NameAvailability.TAKEN
    assert fake_client.calls == [("get_script_settings", "acct-1", "demo")]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        api_error(404, 10007, "This Worker does not exist on your account."),
        api_error(400, 10007, "workers.api.error.script_not_found"),
    ],
)
async def test_not_found_is_available(deploy_ctx, fake_client, error):
    fake_client.fail("get_script_settings", error)
    assert await check_name_availability(deploy_ctx, "demo") is NameAvailability.AVAILABLE


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        api_error(403, 10000, "Authentication error"),
        api_error(500, 10013, "An unknown error has occurred"),
        CloudflareAPIError("Request to Cloudflare failed: connection reset"),
    ],
)
async def test_lookup_failure_is_unknown(deploy_ctx, fake_client, error):
    fake_client.fail("get_script_settings", error)
    assert await check_name_availability(deploy_ctx, "demo") is NameAvailability.UNKNOWN
