"""Error taxonomy for the deployment wizard

Every failure that reaches the operator is one of these. The CLI prints the
message and exits non-zero for everything except DomainError, which only ever
shows up as a warning in the final report.
"""

from typing import List, Optional


class WizardError(Exception):
    """Base class for all operator-facing wizard failures"""


class ValidationError(WizardError):
    """Operator input is missing or malformed; raised before any network call"""

    def __init__(self, message: str, fields: Optional[List[str]] = None):
        super().__init__(message)
        self.fields = fields or []


class AuthError(WizardError):
    """The login attempt failed

    ``kind`` tells the failure modes apart:
    ``state_mismatch``, ``missing_code``, ``denied``, ``timeout``, ``exchange``,
    ``listener``.
    """

    def __init__(self, message: str, kind: str = "exchange"):
        super().__init__(message)
        self.kind = kind


class ProvisionError(WizardError):
    """A resource could not be created and the operator chose to abort"""

    def __init__(self, message: str, step: Optional[str] = None):
        super().__init__(message)
        self.step = step


class UploadError(WizardError):
    """The worker bundle could not be read, encoded or uploaded"""


class DomainError(WizardError):
    """The custom domain could not be resolved to a zone or attached"""
