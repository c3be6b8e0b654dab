"""Interactive Cloudflare login: browser launch plus wait for the callback"""

import asyncio
import logging
from typing import Optional

from rich.console import Console

from errors import AuthError
from settings import LOGIN_TIMEOUT
from .authorization import UrlOpener, build_authorize_url, open_in_browser
from .callback_server import OAuthCallbackServer
from .pkce import create_auth_session
from .token_exchange import OAuthToken

logger = logging.getLogger(__name__)


class LoginFlow:
    """Orchestrates one OAuth authorization-code-with-PKCE login

    The callback server must already be started; this class only registers an
    attempt on it and waits for the token it delivers.
    """

    def __init__(
        self,
        callback_server: OAuthCallbackServer,
        open_url: UrlOpener = open_in_browser,
        console: Optional[Console] = None,
        timeout: float = LOGIN_TIMEOUT,
    ):
        self.callback_server = callback_server
        self.open_url = open_url
        self.console = console or Console()
        self.timeout = timeout

    async def login(self) -> OAuthToken:
        """Run the login and return the obtained token

        Raises:
            AuthError: On timeout, denial or a failed code exchange
        """
        session = create_auth_session()
        url = build_authorize_url(session)
        future = self.callback_server.begin_attempt(session)

        self.console.print("\n[bold]Login to [orange1]Cloudflare[/orange1][/bold]")
        try:
            opened = self.open_url(url)
        except Exception as e:
            logger.warning(f"Browser launch raised: {e}")
            opened = False

        if opened:
            self.console.print("[green]✓ Browser opened[/green]")
        else:
            self.console.print("[yellow]⚠ Could not open browser automatically[/yellow]")
            self.console.print("Please open this URL in your browser:")
        # Always show the URL so a headless operator can finish the login elsewhere
        self.console.print(f"[dim]{url}[/dim]\n")
        self.console.print("Waiting for authentication...")

        try:
            token = await asyncio.wait_for(future, timeout=self.timeout)
        except asyncio.TimeoutError:
            attempt = self.callback_server.attempt
            reason = attempt.last_rejection if attempt else None
            message = f"No valid login callback received within {self.timeout:g}s"
            if reason == "state_mismatch":
                message += " (a callback with an invalid state was rejected)"
            elif reason == "missing_code":
                message += " (a callback without an authorization code was rejected)"
            raise AuthError(message, kind=reason or "timeout")
        finally:
            self.callback_server.end_attempt()

        self.console.print("[bold green]✓ Cloudflare logged in successfully[/bold green]")
        return token
