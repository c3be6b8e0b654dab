"""
Cloudflare OAuth authentication module
"""
from .pkce import (
    AuthSession,
    create_auth_session,
    generate_code_challenge,
    generate_code_verifier,
    generate_state,
)
from .authorization import (
    UrlOpener,
    build_authorize_url,
    open_in_browser,
)
from .token_exchange import (
    OAuthToken,
    exchange_code_for_token,
)
from .callback_server import (
    LoginAttempt,
    OAuthCallbackServer,
)
from .flow import LoginFlow

__all__ = [
    # PKCE
    "AuthSession",
    "create_auth_session",
    "generate_code_challenge",
    "generate_code_verifier",
    "generate_state",
    # Authorization
    "UrlOpener",
    "build_authorize_url",
    "open_in_browser",
    # Token Exchange
    "OAuthToken",
    "exchange_code_for_token",
    # Callback Server
    "LoginAttempt",
    "OAuthCallbackServer",
    # Flow
    "LoginFlow",
]
