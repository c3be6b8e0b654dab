"""OAuth token exchange against the Cloudflare token endpoint"""

import logging
from typing import Any, Dict, Optional

import httpx

from errors import AuthError
from settings import CLIENT_ID, CONNECT_TIMEOUT, REDIRECT_URI, REQUEST_TIMEOUT, TOKEN_URL

logger = logging.getLogger(__name__)


class OAuthToken:
    """OAuth token response"""

    def __init__(
        self,
        access_token: str,
        refresh_token: Optional[str] = None,
        expires_in: Optional[int] = None,
        token_type: str = "Bearer",
        scope: Optional[str] = None,
    ):
        self.access_token = access_token
        self.refresh_token = refresh_token
        self.expires_in = expires_in
        self.token_type = token_type
        self.scope = scope

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> "OAuthToken":
        """Build a token from the token endpoint JSON body

        Raises:
            AuthError: If the body has no access token
        """
        access_token = data.get("access_token")
        if not access_token:
            raise AuthError("Token endpoint response did not contain an access token", kind="exchange")
        return cls(
            access_token=access_token,
            refresh_token=data.get("refresh_token"),
            expires_in=data.get("expires_in"),
            token_type=data.get("token_type", "Bearer"),
            scope=data.get("scope"),
        )

    def __repr__(self) -> str:
        # Never render the credential itself
        return f"OAuthToken(token_type={self.token_type!r}, expires_in={self.expires_in!r})"


async def exchange_code_for_token(
    code: str,
    code_verifier: str,
    client: Optional[httpx.AsyncClient] = None,
) -> OAuthToken:
    """Exchange an authorization code for an access token

    Args:
        code: Authorization code from the callback
        code_verifier: PKCE verifier matching the challenge sent earlier
        client: Optional HTTP client to reuse

    Returns:
        The obtained token

    Raises:
        AuthError: On network failure, provider rejection or a malformed body
    """
    form = {
        "grant_type": "authorization_code",
        "client_id": CLIENT_ID,
        "code": code,
        "code_verifier": code_verifier,
        "redirect_uri": REDIRECT_URI,
    }

    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=httpx.Timeout(REQUEST_TIMEOUT, connect=CONNECT_TIMEOUT))

    try:
        response = await client.post(
            TOKEN_URL,
            data=form,
            headers={"Accept": "application/json"},
        )
    except httpx.HTTPError as e:
        raise AuthError(f"Token exchange request failed: {e}", kind="exchange") from e
    finally:
        if owns_client:
            await client.aclose()

    if response.status_code != 200:
        logger.error(f"Token exchange failed: {response.status_code} - {response.text}")
        raise AuthError(
            f"Token exchange rejected by Cloudflare (HTTP {response.status_code})",
            kind="exchange",
        )

    try:
        data = response.json()
    except ValueError as e:
        raise AuthError("Token endpoint returned a non-JSON body", kind="exchange") from e

    if not isinstance(data, dict):
        raise AuthError("Token endpoint returned an unexpected body", kind="exchange")

    logger.info("OAuth token obtained")
    return OAuthToken.from_response(data)
