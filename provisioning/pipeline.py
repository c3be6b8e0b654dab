"""Ordered creation of every Cloudflare resource a deployment needs

namespace -> database -> script (with bindings) -> workers.dev -> custom domain

Each step returns a StepOutcome. Retryable failures go back to the operator,
who either retries the same step or aborts the whole deployment. Nothing is
rolled back: resources created before a failure stay in the account.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Awaitable, Callable, List, Optional

from rich.console import Console

from errors import DomainError, ProvisionError, UploadError
from settings import COMPATIBILITY_FLAGS, MAIN_MODULE, PANEL_PATH
from workers_api import (
    Binding,
    CloudflareAPIError,
    D1DatabaseBinding,
    DomainBinder,
    KVNamespaceBinding,
    ScriptUploadForm,
    SecretTextBinding,
)
from .models import (
    DeployContext,
    DeploymentReport,
    DeploymentSpec,
    FatalFailure,
    ProvisionedResources,
    RetryableFailure,
    StepOutcome,
    Success,
)

logger = logging.getLogger(__name__)

# (step name, failure reason) -> True to retry, False to abort
RetryPrompt = Callable[[str, str], Awaitable[bool]]

STEP_CREATE_NAMESPACE = "CreateNamespace"
STEP_CREATE_DATABASE = "CreateDatabase"
STEP_UPLOAD_SCRIPT = "UploadScript"
STEP_ENABLE_SUBDOMAIN = "EnableSubdomain"


def kv_namespace_title(name: str) -> str:
    return f"USER_KV_{name}"


def d1_database_name(name: str) -> str:
    return f"DB_{name}"


def build_bindings(spec: DeploymentSpec, namespace_id: str, database_id: str) -> List[Binding]:
    """Bindings the worker script expects

    ROOT_PROXY_URL is only bound when the operator supplied one.
    """
    bindings: List[Binding] = [
        D1DatabaseBinding(name="DB", id=database_id),
        KVNamespaceBinding(name="USER_KV", namespace_id=namespace_id),
        SecretTextBinding(name="ADMIN_KEY", text=spec.admin_key),
        SecretTextBinding(name="PROXYIP", text=spec.proxy_ip),
    ]
    if spec.root_proxy_url:
        bindings.append(SecretTextBinding(name="ROOT_PROXY_URL", text=spec.root_proxy_url))
    return bindings


def panel_url(host: str) -> str:
    return f"https://{host}/{PANEL_PATH}"


class ResourceProvisioner:
    """Runs the provisioning steps for one deployment"""

    def __init__(
        self,
        ctx: DeployContext,
        bundle_path: Path,
        confirm_retry: RetryPrompt,
        console: Optional[Console] = None,
        domain_binder: Optional[DomainBinder] = None,
        compatibility_date: Optional[str] = None,
    ):
        self.ctx = ctx
        self.bundle_path = Path(bundle_path)
        self.confirm_retry = confirm_retry
        self.console = console or Console()
        self.domain_binder = domain_binder or DomainBinder(ctx.client, ctx.account_id)
        self.compatibility_date = compatibility_date or datetime.now(timezone.utc).strftime("%Y-%m-%d")

    async def run(self, spec: DeploymentSpec) -> DeploymentReport:
        """Provision everything for ``spec``

        Raises:
            ValidationError: Before any call if ``spec`` is incomplete
            ProvisionError: If the operator aborts or a non-retryable step fails
            UploadError: If the script cannot be encoded or uploaded
        """
        spec.validate()
        resources = ProvisionedResources()
        warnings: List[str] = []

        resources.namespace_id = await self._run_step(STEP_CREATE_NAMESPACE, self.create_namespace, spec)
        resources.database_id = await self._run_step(STEP_CREATE_DATABASE, self.create_database, spec)
        resources.script_name = await self._run_step(STEP_UPLOAD_SCRIPT, self.upload_script, spec, resources)
        await self._run_step(STEP_ENABLE_SUBDOMAIN, self.enable_subdomain, spec)

        if spec.custom_domain:
            self.console.print(f"\nAttaching custom domain '{spec.custom_domain}' to worker '{spec.name}'...")
            try:
                binding = await self.domain_binder.attach(spec.name, spec.custom_domain)
            except DomainError as e:
                logger.warning(f"Custom domain not attached: {e}")
                self.console.print(f"[yellow]⚠ Failed to add custom domain: {e}[/yellow]")
                warnings.append(f"Custom domain '{spec.custom_domain}' was not attached: {e}")
            else:
                resources.zone_id = binding.zone_id
                resources.custom_hostname = binding.hostname
                self.console.print("[green]✓ Custom domain attached successfully[/green]")

        url: Optional[str] = None
        if resources.custom_hostname:
            url = panel_url(resources.custom_hostname)
        else:
            try:
                resources.workers_subdomain = await self.ctx.client.get_workers_subdomain(self.ctx.account_id)
            except CloudflareAPIError as e:
                # The worker is live; only its address is unknown
                logger.warning(f"Could not read workers.dev subdomain: {e}")
                warnings.append(
                    f"Worker '{spec.name}' is deployed but its workers.dev address could not be read: {e}. "
                    "Find it under Workers & Pages in the Cloudflare dashboard."
                )
            else:
                url = panel_url(f"{spec.name}.{resources.workers_subdomain}")

        return DeploymentReport(panel_url=url, resources=resources, warnings=warnings)

    async def _run_step(self, name: str, step: Callable[..., Awaitable[StepOutcome]], *args):
        while True:
            outcome = await step(*args)
            if isinstance(outcome, Success):
                return outcome.value
            if isinstance(outcome, FatalFailure):
                logger.error(f"{name} failed: {outcome.reason}")
                raise outcome.error

            logger.warning(f"{name} failed: {outcome.reason}")
            self.console.print(f"[red]✗ {outcome.reason}[/red]")
            if not await self.confirm_retry(name, outcome.reason):
                raise ProvisionError(f"Deployment aborted at {name}: {outcome.reason}", step=name)
            logger.info(f"Retrying {name}")

    # Steps

    async def create_namespace(self, spec: DeploymentSpec) -> StepOutcome:
        title = kv_namespace_title(spec.name)
        self.console.print(f"\nCreating KV namespace '{title}'...")
        try:
            namespace = await self.ctx.client.create_kv_namespace(self.ctx.account_id, title)
        except CloudflareAPIError as e:
            return RetryableFailure(f"Error creating KV namespace: {e}")
        self.console.print("[green]✓ KV namespace created successfully[/green]")
        return Success(namespace.id)

    async def create_database(self, spec: DeploymentSpec) -> StepOutcome:
        name = d1_database_name(spec.name)
        self.console.print(f"\nCreating D1 database '{name}'...")
        try:
            database = await self.ctx.client.create_d1_database(self.ctx.account_id, name)
        except CloudflareAPIError as e:
            return RetryableFailure(f"Error creating D1 database: {e}")
        self.console.print("[green]✓ D1 database created successfully[/green]")
        return Success(database.uuid)

    async def upload_script(self, spec: DeploymentSpec, resources: ProvisionedResources) -> StepOutcome:
        if not resources.namespace_id or not resources.database_id:
            return FatalFailure(UploadError("Cannot upload the worker before its namespace and database exist"))

        self.console.print(f"\nCreating worker '{spec.name}'...")
        form = ScriptUploadForm(
            main_module=MAIN_MODULE,
            bindings=build_bindings(spec, resources.namespace_id, resources.database_id),
            compatibility_date=self.compatibility_date,
            compatibility_flags=COMPATIBILITY_FLAGS,
            bundle_path=self.bundle_path,
        )
        try:
            body, content_type = form.encode()
        except UploadError as e:
            return FatalFailure(e)

        try:
            await self.ctx.client.upload_script(self.ctx.account_id, spec.name, body, content_type)
        except CloudflareAPIError as e:
            return FatalFailure(UploadError(f"Error uploading worker script: {e}"))

        self.console.print("[green]✓ Worker created successfully[/green]")
        return Success(spec.name)

    async def enable_subdomain(self, spec: DeploymentSpec) -> StepOutcome:
        self.console.print("\nEnabling workers.dev subdomain...")
        try:
            await self.ctx.client.enable_script_subdomain(self.ctx.account_id, spec.name)
        except CloudflareAPIError as e:
            if not e.mentions("already exists"):
                return FatalFailure(
                    ProvisionError(f"Error enabling workers.dev subdomain: {e}", step=STEP_ENABLE_SUBDOMAIN)
                )
            logger.info("workers.dev subdomain already enabled")
        self.console.print("[green]✓ Subdomain is enabled[/green]")
        return Success(True)
