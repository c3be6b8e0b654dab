"""
Local OAuth callback listener

Receives the Cloudflare redirect on a fixed localhost port, checks the state
token, exchanges the code and hands the token to the waiting login flow
through a one-shot future.
"""
import asyncio
import logging
from typing import Awaitable, Callable, Optional

from aiohttp import web

from errors import AuthError
from settings import OAUTH_CALLBACK_HOST, OAUTH_CALLBACK_PATH, OAUTH_CALLBACK_PORT, SHUTDOWN_TIMEOUT
from .pkce import AuthSession
from .token_exchange import OAuthToken, exchange_code_for_token

logger = logging.getLogger(__name__)

# (code, code_verifier) -> token
TokenExchanger = Callable[[str, str], Awaitable[OAuthToken]]

SUCCESS_PAGE = """
<html>
    <head><title>BPB Wizard</title></head>
    <body style="font-family: sans-serif; text-align: center; margin-top: 10%;">
        <h1>Cloudflare login successful</h1>
        <p>You can now close this window and return to the terminal.</p>
        <script>
            setTimeout(function() {
                window.close();
            }, 2000);
        </script>
    </body>
</html>
"""

FAILURE_PAGE = """
<html>
    <head><title>BPB Wizard</title></head>
    <body style="font-family: sans-serif; text-align: center; margin-top: 10%;">
        <h1>Cloudflare login failed</h1>
        <p>{reason}</p>
        <p>Return to the terminal for details.</p>
    </body>
</html>
"""


class LoginAttempt:
    """Expected state plus the one-shot handoff for a single login attempt"""

    def __init__(self, session: AuthSession, future: "asyncio.Future[OAuthToken]"):
        self.session = session
        self.future = future
        self.code_received = False
        self.last_rejection: Optional[str] = None


class OAuthCallbackServer:
    """Short-lived local HTTP server acting as the OAuth redirect target"""

    def __init__(
        self,
        exchange: TokenExchanger = exchange_code_for_token,
        host: str = OAUTH_CALLBACK_HOST,
        port: int = OAUTH_CALLBACK_PORT,
    ):
        self.host = host
        self.port = port
        self._exchange = exchange
        self._attempt: Optional[LoginAttempt] = None
        self.runner: Optional[web.AppRunner] = None
        self.app = web.Application()

        self.app.router.add_get(OAUTH_CALLBACK_PATH, self._handle_callback)

    @property
    def attempt(self) -> Optional[LoginAttempt]:
        return self._attempt

    def begin_attempt(self, session: AuthSession) -> "asyncio.Future[OAuthToken]":
        """Register a login attempt and return its one-shot future

        Any earlier attempt still pending is cancelled.
        """
        self.end_attempt()
        future = asyncio.get_running_loop().create_future()
        self._attempt = LoginAttempt(session, future)
        return future

    def end_attempt(self) -> None:
        """Forget the current attempt, cancelling its future if still pending"""
        if self._attempt is not None and not self._attempt.future.done():
            self._attempt.future.cancel()
        self._attempt = None

    async def _handle_callback(self, request: web.Request) -> web.Response:
        """Handle the OAuth redirect"""
        attempt = self._attempt
        if attempt is None:
            logger.warning("Callback received with no login in progress")
            return web.Response(text="No login in progress", status=400)

        if attempt.future.done() or attempt.code_received:
            return web.Response(text="Login already completed", status=400)

        # Exact match only; a missing parameter never matches
        state = request.query.get("state")
        if state != attempt.session.state:
            logger.warning("Rejected OAuth callback with invalid state")
            attempt.last_rejection = "state_mismatch"
            return web.Response(text="Invalid state", status=400)

        error = request.query.get("error")
        if error:
            description = request.query.get("error_description") or error
            logger.error(f"Cloudflare returned OAuth error: {error}")
            attempt.future.set_exception(
                AuthError(f"Cloudflare login was not authorized: {description}", kind="denied")
            )
            return web.Response(
                text=FAILURE_PAGE.format(reason="Authorization was denied."),
                content_type="text/html",
                status=400,
            )

        code = request.query.get("code")
        if not code:
            logger.warning("Rejected OAuth callback without authorization code")
            attempt.last_rejection = "missing_code"
            return web.Response(text="No code", status=400)

        # Claim the attempt before awaiting so a duplicate redirect cannot exchange twice
        attempt.code_received = True
        try:
            token = await self._exchange(code, attempt.session.code_verifier)
        except Exception as e:
            error = e
            if not isinstance(e, AuthError):
                logger.exception("Unexpected error during token exchange")
                error = AuthError(f"Token exchange failed: {e}", kind="exchange")
            if not attempt.future.done():
                attempt.future.set_exception(error)
            return web.Response(
                text=FAILURE_PAGE.format(reason="The authorization code could not be exchanged."),
                content_type="text/html",
                status=502,
            )

        if attempt.future.done():
            # Attempt was abandoned (timeout) while the exchange was in flight
            return web.Response(text="Login attempt expired", status=400)

        attempt.future.set_result(token)
        logger.info("OAuth callback handled, token delivered")
        return web.Response(text=SUCCESS_PAGE, content_type="text/html")

    async def start(self) -> None:
        """Start listening

        Raises:
            AuthError: If the callback port cannot be bound
        """
        self.runner = web.AppRunner(self.app)
        await self.runner.setup()

        site = web.TCPSite(self.runner, host=self.host, port=self.port)
        try:
            await site.start()
        except OSError as e:
            await self.runner.cleanup()
            self.runner = None
            raise AuthError(
                f"Could not listen on {self.host}:{self.port} for the OAuth callback: {e}",
                kind="listener",
            ) from e
        logger.info(f"OAuth callback server listening on {self.host}:{self.port}")

    async def stop(self, timeout: float = SHUTDOWN_TIMEOUT) -> None:
        """Shut the listener down, giving up after ``timeout`` seconds"""
        self.end_attempt()
        if self.runner is None:
            return
        try:
            await asyncio.wait_for(self.runner.cleanup(), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning(f"OAuth callback server did not shut down within {timeout}s")
        finally:
            self.runner = None
