"""Main CLI application class for the BPB deployment wizard"""

import asyncio
import logging
import tempfile
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.panel import Panel

import settings
from cloudflare_oauth import LoginFlow, OAuthCallbackServer, UrlOpener, open_in_browser
from errors import ProvisionError, ValidationError
from provisioning import (
    DeployContext,
    DeploymentReport,
    DeploymentSpec,
    NameAvailability,
    ResourceProvisioner,
    check_name_availability,
    fetch_worker_bundle,
)
from workers_api import CloudAccount, CloudflareAPIError, CloudflareClient
from cli.prompts import WizardPrompter
from cli.status_display import show_report

logger = logging.getLogger(__name__)


class DeployerCLI:
    """Interactive wizard: login, collect settings, provision, report"""

    def __init__(
        self,
        console: Optional[Console] = None,
        bundle_path: Optional[Path] = None,
        api_token: Optional[str] = None,
        account_id: Optional[str] = None,
        open_url: UrlOpener = open_in_browser,
        prompter: Optional[WizardPrompter] = None,
        callback_server: Optional[OAuthCallbackServer] = None,
    ):
        self.console = console or Console()
        self.bundle_path = Path(bundle_path) if bundle_path else None
        self.api_token = api_token
        self.account_id = account_id
        self.open_url = open_url
        self.prompter = prompter or WizardPrompter(self.console)
        self.callback_server = callback_server or OAuthCallbackServer()

        # Create event loop
        self.loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self.loop)

    def display_header(self):
        """Display application header"""
        self.console.print("\n")
        self.console.print(Panel.fit(
            f"[bold green]BPB Wizard[/bold green] [dim]{settings.VERSION}[/dim]\n"
            "[dim]Deploy the BPB panel worker to Cloudflare[/dim]",
            border_style="green"
        ))

    def run(self) -> DeploymentReport:
        """Run the wizard to completion

        Raises:
            WizardError: Any failure the operator needs to see
        """
        try:
            return self.loop.run_until_complete(self.deploy())
        finally:
            self.loop.close()

    async def deploy(self) -> DeploymentReport:
        """Full wizard with the callback listener alive around it"""
        self.display_header()

        spec = await self.prompter.collect_spec()
        spec.validate()

        if self.api_token:
            return await self._deploy_with_token(self.api_token, spec)

        await self.callback_server.start()
        try:
            flow = LoginFlow(self.callback_server, open_url=self.open_url, console=self.console)
            token = await flow.login()
            return await self._deploy_with_token(token.access_token, spec)
        finally:
            # Bounded: never hangs even if no callback ever arrived
            await self.callback_server.stop(settings.SHUTDOWN_TIMEOUT)

    async def _deploy_with_token(self, api_token: str, spec: DeploymentSpec) -> DeploymentReport:
        async with CloudflareClient(api_token) as client:
            account = await self.resolve_account(client)
            ctx = DeployContext(client=client, account=account)
            await self.check_name(ctx, spec.name)

            self.console.print("\n[bold]Starting deployment process...[/bold]")
            with tempfile.TemporaryDirectory(prefix=".bpb-wizard") as workdir:
                bundle_path = self.bundle_path
                if bundle_path is None:
                    self.console.print("Downloading worker bundle...")
                    bundle_path = await fetch_worker_bundle(settings.WORKER_BUNDLE_URL, Path(workdir))

                provisioner = ResourceProvisioner(
                    ctx,
                    bundle_path=bundle_path,
                    confirm_retry=self.prompter.confirm_retry,
                    console=self.console,
                )
                report = await provisioner.run(spec)

        show_report(report, self.console)
        return report

    async def resolve_account(self, client: CloudflareClient) -> CloudAccount:
        """Pick the account every later call is scoped to"""
        if self.account_id:
            return CloudAccount(id=self.account_id)

        try:
            accounts = await client.list_accounts()
        except CloudflareAPIError as e:
            raise ProvisionError(f"Error listing accounts: {e}") from e
        if not accounts:
            raise ProvisionError("No Cloudflare account is available for this login")
        if len(accounts) > 1:
            logger.info(f"{len(accounts)} accounts available, using the first one")

        account = accounts[0]
        self.console.print(f"[dim]Using account: {account.name or account.id}[/dim]")
        return account

    async def check_name(self, ctx: DeployContext, name: str) -> None:
        """Stop before creating anything if the worker name is taken"""
        availability = await check_name_availability(ctx, name)
        if availability is NameAvailability.TAKEN:
            raise ValidationError(
                f"Worker name '{name}' is already taken. Please choose another name.",
                fields=["worker name"],
            )
        if availability is NameAvailability.UNKNOWN:
            self.console.print(f"[yellow]⚠ Could not verify whether worker name '{name}' is free[/yellow]")
            if not await self.prompter.confirm("Continue anyway? An existing worker would be replaced"):
                raise ProvisionError("Deployment aborted: worker name availability unknown")
