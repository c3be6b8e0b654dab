"""Shared helpers for the test suite"""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Optional

import httpx

from workers_api import (
    CloudAccount,
    CloudflareAPIError,
    CloudflareClient,
    D1Database,
    KVNamespace,
    ScriptUploadResult,
    WorkerDomain,
    Zone,
)


def envelope(result: Any = None, success: bool = True, errors: Optional[list] = None) -> Dict[str, Any]:
    return {"success": success, "errors": errors or [], "messages": [], "result": result}


def mock_client(handler: Callable[[httpx.Request], httpx.Response]) -> CloudflareClient:
    return CloudflareClient("test-token", base_url="https://cf.test/client/v4", transport=httpx.MockTransport(handler))


class FakeCloudflareClient:
    """In-memory stand-in recording every call in order"""

    def __init__(self) -> None:
        self.calls: List[tuple] = []
        self.failures: Dict[str, List[Exception]] = {}
        self.zones: List[Zone] = []
        self.subdomain = "acme.workers.dev"
        self.uploads: List[Dict[str, Any]] = []
        self.accounts = [CloudAccount(id="acct-1", name="Acme")]
        self.closed = False

    async def __aenter__(self) -> "FakeCloudflareClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.closed = True

    def fail(self, method: str, *errors: Exception) -> None:
        self.failures.setdefault(method, []).extend(errors)

    def _maybe_fail(self, method: str) -> None:
        queued = self.failures.get(method)
        if queued:
            raise queued.pop(0)

    async def list_accounts(self) -> List[CloudAccount]:
        self.calls.append(("list_accounts",))
        self._maybe_fail("list_accounts")
        return list(self.accounts)

    async def create_kv_namespace(self, account_id: str, title: str) -> KVNamespace:
        self.calls.append(("create_kv_namespace", account_id, title))
        self._maybe_fail("create_kv_namespace")
        return KVNamespace(id="ns-1", title=title)

    async def create_d1_database(self, account_id: str, name: str) -> D1Database:
        self.calls.append(("create_d1_database", account_id, name))
        self._maybe_fail("create_d1_database")
        return D1Database(uuid="db-1", name=name)

    async def upload_script(self, account_id: str, script_name: str, body: bytes, content_type: str) -> ScriptUploadResult:
        self.calls.append(("upload_script", account_id, script_name))
        self._maybe_fail("upload_script")
        self.uploads.append({"body": body, "content_type": content_type})
        return ScriptUploadResult(id=script_name)

    async def enable_script_subdomain(self, account_id: str, script_name: str) -> None:
        self.calls.append(("enable_script_subdomain", account_id, script_name))
        self._maybe_fail("enable_script_subdomain")

    async def get_workers_subdomain(self, account_id: str) -> str:
        self.calls.append(("get_workers_subdomain", account_id))
        self._maybe_fail("get_workers_subdomain")
        return self.subdomain

    async def list_zones(self, account_id: str, name: Optional[str] = None) -> List[Zone]:
        self.calls.append(("list_zones", account_id, name))
        self._maybe_fail("list_zones")
        return [z for z in self.zones if name is None or z.name == name]

    async def attach_worker_domain(self, account_id, hostname, service, zone_id, environment="production") -> WorkerDomain:
        self.calls.append(("attach_worker_domain", account_id, hostname, service, zone_id, environment))
        self._maybe_fail("attach_worker_domain")
        return WorkerDomain(hostname=hostname, service=service, zone_id=zone_id, environment=environment)

    async def get_script_settings(self, account_id: str, script_name: str) -> Dict[str, Any]:
        self.calls.append(("get_script_settings", account_id, script_name))
        self._maybe_fail("get_script_settings")
        return {}

    def call_names(self) -> List[str]:
        return [c[0] for c in self.calls]


def api_error(status: int, code: int, message: str) -> CloudflareAPIError:
    return CloudflareAPIError.from_response(status, envelope(success=False, errors=[{"code": code, "message": message}]))


def parse_json_body(request: httpx.Request) -> Dict[str, Any]:
    return json.loads(request.content.decode("utf-8"))
