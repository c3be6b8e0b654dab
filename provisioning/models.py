"""Value types shared by the provisioning pipeline"""

import re
from dataclasses import dataclass, field
from typing import Generic, List, Optional, TypeVar, Union

from errors import ValidationError, WizardError
from workers_api import CloudAccount, CloudflareClient

# Cloudflare script names: lowercase alphanumerics, dashes and underscores
WORKER_NAME_PATTERN = re.compile(r"^[a-z0-9](?:[a-z0-9_-]{0,61}[a-z0-9])?$")

T = TypeVar("T")


@dataclass(frozen=True)
class DeployContext:
    """Client and account shared read-only by every provisioning call"""
    client: CloudflareClient
    account: CloudAccount

    @property
    def account_id(self) -> str:
        return self.account.id


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class DeploymentSpec:
    """Operator-supplied configuration for one deployment

    Attributes:
        name: Worker script name
        admin_key: Admin panel password, bound as ADMIN_KEY
        proxy_ip: Clean IP or domain for generated configs, bound as PROXYIP
        root_proxy_url: Optional site reverse-proxied at '/', bound as ROOT_PROXY_URL
        custom_domain: Optional hostname to attach to the worker
    """
    name: str
    admin_key: str
    proxy_ip: str
    root_proxy_url: Optional[str] = None
    custom_domain: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "name", (self.name or "").strip())
        object.__setattr__(self, "admin_key", (self.admin_key or "").strip())
        object.__setattr__(self, "proxy_ip", (self.proxy_ip or "").strip())
        object.__setattr__(self, "root_proxy_url", _clean(self.root_proxy_url))
        custom_domain = _clean(self.custom_domain)
        object.__setattr__(self, "custom_domain", custom_domain.lower() if custom_domain else None)

    def validate(self) -> None:
        """Check mandatory fields before anything touches the network

        Raises:
            ValidationError: Naming every missing field, or a malformed worker name
        """
        missing = [
            label
            for label, value in (
                ("worker name", self.name),
                ("admin key", self.admin_key),
                ("proxy IP", self.proxy_ip),
            )
            if not value
        ]
        if missing:
            raise ValidationError(f"Missing required value(s): {', '.join(missing)}", fields=missing)

        if not WORKER_NAME_PATTERN.match(self.name):
            raise ValidationError(
                f"Invalid worker name '{self.name}': use 1-63 lowercase letters, digits, '-' or '_'",
                fields=["worker name"],
            )


class ProvisionedResources:
    """Identifiers minted during the pipeline

    Each field can be written exactly once; later steps and the final report
    only read them.
    """

    FIELDS = (
        "namespace_id",
        "database_id",
        "script_name",
        "workers_subdomain",
        "zone_id",
        "custom_hostname",
    )

    def __init__(self):
        for name in self.FIELDS:
            object.__setattr__(self, name, None)

    def __setattr__(self, name, value):
        if name not in self.FIELDS:
            raise AttributeError(f"Unknown resource field: {name}")
        if getattr(self, name) is not None:
            raise AttributeError(f"{name} is already set")
        object.__setattr__(self, name, value)

    def as_dict(self) -> dict:
        return {name: getattr(self, name) for name in self.FIELDS}

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in self.as_dict().items())
        return f"ProvisionedResources({fields})"


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T


@dataclass(frozen=True)
class RetryableFailure:
    reason: str


@dataclass(frozen=True)
class FatalFailure:
    error: WizardError

    @property
    def reason(self) -> str:
        return str(self.error)


StepOutcome = Union[Success, RetryableFailure, FatalFailure]


@dataclass
class DeploymentReport:
    """What the operator sees at the end of a deployment"""
    # None when the worker address could not be determined
    panel_url: Optional[str]
    resources: ProvisionedResources
    warnings: List[str] = field(default_factory=list)
