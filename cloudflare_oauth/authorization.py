"""OAuth authorization URL construction and browser launch"""

import logging
import webbrowser
from typing import Callable
from urllib.parse import urlencode

from settings import AUTHORIZE_URL, CLIENT_ID, REDIRECT_URI, SCOPES
from .pkce import AuthSession

logger = logging.getLogger(__name__)

# Opens a URL in the operator's browser, returns False when nothing was opened
UrlOpener = Callable[[str], bool]


def build_authorize_url(session: AuthSession) -> str:
    """Construct the Cloudflare authorize URL for a login attempt

    Args:
        session: PKCE/state values for this attempt

    Returns:
        Full authorization URL
    """
    params = {
        "access_type": "offline",
        "client_id": CLIENT_ID,
        "code_challenge": session.code_challenge,
        "code_challenge_method": "S256",
        "redirect_uri": REDIRECT_URI,
        "response_type": "code",
        "scope": " ".join(SCOPES),
        "state": session.state,
    }
    return f"{AUTHORIZE_URL}?{urlencode(params)}"


def open_in_browser(url: str) -> bool:
    """Default URL opener backed by the webbrowser module"""
    try:
        return webbrowser.open(url)
    except webbrowser.Error as e:
        logger.warning(f"Could not launch browser: {e}")
        return False
