"""PKCE (Proof Key for Code Exchange) and anti-forgery state generation"""

import base64
import hashlib
import secrets
import string
from dataclasses import dataclass, field

STATE_LENGTH = 16
VERIFIER_BYTES = 32

_STATE_ALPHABET = string.ascii_letters


def generate_state() -> str:
    """Generate the anti-forgery state token sent with the authorize request

    Returns:
        16-character token of ASCII letters
    """
    return "".join(secrets.choice(_STATE_ALPHABET) for _ in range(STATE_LENGTH))


def generate_code_verifier() -> str:
    """Generate a PKCE code verifier

    32 random bytes, URL-safe base64 without padding (43 characters).
    """
    return base64.urlsafe_b64encode(secrets.token_bytes(VERIFIER_BYTES)).decode("ascii").rstrip("=")


def generate_code_challenge(code_verifier: str) -> str:
    """Derive the S256 code challenge for a verifier

    Args:
        code_verifier: The PKCE verifier

    Returns:
        base64url(sha256(verifier)) with padding stripped
    """
    digest = hashlib.sha256(code_verifier.encode("ascii")).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")


@dataclass(frozen=True)
class AuthSession:
    """State and PKCE values for a single login attempt

    Attributes:
        state: Anti-forgery token echoed back on the redirect
        code_verifier: Secret sent to the token endpoint
        code_challenge: S256 challenge sent to the authorize endpoint
    """
    state: str
    code_verifier: str
    code_challenge: str = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "code_challenge", generate_code_challenge(self.code_verifier))


def create_auth_session() -> AuthSession:
    """Create a fresh session; call once per login attempt"""
    return AuthSession(state=generate_state(), code_verifier=generate_code_verifier())
