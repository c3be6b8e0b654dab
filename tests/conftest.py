from __future__ import annotations

import pytest

from provisioning import DeployContext
from workers_api import CloudAccount, make_extractor
from support import FakeCloudflareClient


@pytest.fixture
def fake_client() -> FakeCloudflareClient:
    return FakeCloudflareClient()


@pytest.fixture
def deploy_ctx(fake_client) -> DeployContext:
    return DeployContext(client=fake_client, account=CloudAccount(id="acct-1", name="Acme"))


@pytest.fixture
def extractor(tmp_path):
    # Bundled public suffix snapshot only; tests never touch the network
    return make_extractor(cache_dir=str(tmp_path / "tld"), offline=True)


@pytest.fixture
def bundle(tmp_path):
    path = tmp_path / "worker.js"
    path.write_bytes(b"export default { fetch() { return new Response('ok'); } };\n")
    return path

