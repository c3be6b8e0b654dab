"""Cloudflare REST API client for the calls the wizard needs"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from settings import API_BASE, CONNECT_TIMEOUT, REQUEST_TIMEOUT
from .errors import CloudflareAPIError
from .models import (
    CloudAccount,
    D1Database,
    KVNamespace,
    ScriptUploadResult,
    WorkerDomain,
    Zone,
)

logger = logging.getLogger(__name__)


class CloudflareClient:
    """Thin async wrapper around the Cloudflare v4 API

    Every method returns the parsed ``result`` of the response envelope or
    raises CloudflareAPIError. The client holds no account state; callers pass
    the account id explicitly.
    """

    def __init__(
        self,
        api_token: str,
        base_url: str = API_BASE,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={
                "Authorization": f"Bearer {api_token}",
                "Accept": "application/json",
            },
            timeout=httpx.Timeout(REQUEST_TIMEOUT, connect=CONNECT_TIMEOUT),
            transport=transport,
        )

    async def __aenter__(self) -> "CloudflareClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        """Issue a request and unwrap the API envelope

        Raises:
            CloudflareAPIError: On transport failure, non-2xx status or ``success: false``
        """
        logger.debug(f"{method} {path}")
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise CloudflareAPIError(f"Request to Cloudflare failed: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.is_error or not isinstance(body, dict) or not body.get("success", False):
            error = CloudflareAPIError.from_response(response.status_code, body)
            logger.debug(f"{method} {path} failed: {error}")
            raise error

        return body.get("result")

    # Accounts

    async def list_accounts(self) -> List[CloudAccount]:
        result = await self._request("GET", "/accounts")
        return [CloudAccount.model_validate(item) for item in result or []]

    async def get_account(self, account_id: str) -> CloudAccount:
        result = await self._request("GET", f"/accounts/{account_id}")
        return CloudAccount.model_validate(result)

    # Storage

    async def create_kv_namespace(self, account_id: str, title: str) -> KVNamespace:
        result = await self._request(
            "POST",
            f"/accounts/{account_id}/storage/kv/namespaces",
            json={"title": title},
        )
        return KVNamespace.model_validate(result)

    async def create_d1_database(self, account_id: str, name: str) -> D1Database:
        result = await self._request(
            "POST",
            f"/accounts/{account_id}/d1/database",
            json={"name": name},
        )
        return D1Database.model_validate(result)

    # Workers

    async def get_script_settings(self, account_id: str, script_name: str) -> Dict[str, Any]:
        """Fetch a script's settings; raises with HTTP 404 when the script does not exist"""
        result = await self._request(
            "GET",
            f"/accounts/{account_id}/workers/scripts/{script_name}/settings",
        )
        return result or {}

    async def upload_script(
        self,
        account_id: str,
        script_name: str,
        body: bytes,
        content_type: str,
    ) -> ScriptUploadResult:
        """Create or replace a worker script from a pre-encoded multipart body"""
        result = await self._request(
            "PUT",
            f"/accounts/{account_id}/workers/scripts/{script_name}",
            content=body,
            headers={"Content-Type": content_type},
        )
        return ScriptUploadResult.model_validate(result or {})

    async def enable_script_subdomain(self, account_id: str, script_name: str) -> None:
        """Publish a script on the account's workers.dev subdomain"""
        await self._request(
            "POST",
            f"/accounts/{account_id}/workers/scripts/{script_name}/subdomain",
            json={"enabled": True},
        )

    async def get_workers_subdomain(self, account_id: str) -> str:
        """Return the account's workers.dev host, e.g. ``example.workers.dev``"""
        result = await self._request("GET", f"/accounts/{account_id}/workers/subdomain")
        subdomain = (result or {}).get("subdomain")
        if not subdomain:
            raise CloudflareAPIError("Account has no workers.dev subdomain configured")
        return f"{subdomain}.workers.dev"

    async def attach_worker_domain(
        self,
        account_id: str,
        hostname: str,
        service: str,
        zone_id: str,
        environment: str = "production",
    ) -> WorkerDomain:
        result = await self._request(
            "PUT",
            f"/accounts/{account_id}/workers/domains",
            json={
                "environment": environment,
                "hostname": hostname,
                "service": service,
                "zone_id": zone_id,
            },
        )
        return WorkerDomain.model_validate(result)

    # Zones

    async def list_zones(self, account_id: str, name: Optional[str] = None) -> List[Zone]:
        params = {"account.id": account_id}
        if name:
            params["name"] = name
        result = await self._request("GET", "/zones", params=params)
        return [Zone.model_validate(item) for item in result or []]
