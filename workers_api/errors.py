"""Cloudflare API error type"""

from typing import Any, Dict, List, Optional


class CloudflareAPIError(Exception):
    """A Cloudflare API call failed

    Attributes:
        status_code: HTTP status, or None when the request never got a response
        errors: The ``errors`` array of the API envelope
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.errors = errors or []

    @property
    def codes(self) -> List[int]:
        return [e.get("code") for e in self.errors if "code" in e]

    def mentions(self, text: str) -> bool:
        """Check whether any error message contains ``text`` (case-insensitive)"""
        needle = text.lower()
        if needle in str(self).lower():
            return True
        return any(needle in str(e.get("message", "")).lower() for e in self.errors)

    @classmethod
    def from_response(cls, status_code: int, body: Any) -> "CloudflareAPIError":
        """Build an error from a failed response envelope"""
        errors = body.get("errors", []) if isinstance(body, dict) else []
        messages = "; ".join(
            f"[{e.get('code')}] {e.get('message')}" for e in errors if isinstance(e, dict)
        )
        message = f"Cloudflare API error (HTTP {status_code})"
        if messages:
            message += f": {messages}"
        return cls(message, status_code=status_code, errors=[e for e in errors if isinstance(e, dict)])
