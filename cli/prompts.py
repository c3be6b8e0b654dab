"""Interactive prompts for the deployment wizard

Prompts read stdin on the calling thread so Ctrl-C interrupts them at once.
None of them runs while a login is waiting for its callback: settings are
collected before the listener starts, and retry or confirmation questions only
come after the token was delivered.
"""

import secrets

from rich.console import Console
from rich.prompt import Confirm, Prompt

from provisioning import DeploymentSpec


def default_worker_name() -> str:
    return f"bpb-{secrets.token_hex(3)}"


class WizardPrompter:
    """Collects deployment settings and retry decisions from the operator"""

    def __init__(self, console: Console):
        self.console = console

    async def ask(self, question: str, default: str = "", password: bool = False) -> str:
        answer = Prompt.ask(
            question,
            console=self.console,
            default=default,
            show_default=bool(default),
            password=password,
        )
        return (answer or "").strip()

    async def confirm(self, question: str, default: bool = False) -> bool:
        return Confirm.ask(question, console=self.console, default=default)

    async def collect_spec(self) -> DeploymentSpec:
        """Ask for every deployment setting"""
        self.console.print("\n[bold]Worker settings[/bold]")
        name = await self.ask("- Worker name", default=default_worker_name())
        admin_key = await self.ask("- Admin panel password (ADMIN_KEY)")
        proxy_ip = await self.ask("- Clean IP or domain for configs (PROXYIP)")
        root_proxy_url = await self.ask("- URL to proxy at '/' (optional, press Enter to skip)")
        custom_domain = await self.ask("- Custom domain (optional, press Enter to use workers.dev)")
        return DeploymentSpec(
            name=name,
            admin_key=admin_key,
            proxy_ip=proxy_ip,
            root_proxy_url=root_proxy_url,
            custom_domain=custom_domain,
        )

    async def confirm_retry(self, step: str, reason: str) -> bool:
        """Retry prompt handed to the provisioner"""
        self.console.print(
            "[dim]Resources created before this failure are kept; "
            "a failed attempt may also have left a partial resource in your account.[/dim]"
        )
        return await self.confirm(f"Would you like to retry {step}?", default=True)
