"""Cloudflare Workers API package"""

from .errors import CloudflareAPIError
from .models import (
    Binding,
    CloudAccount,
    D1Database,
    D1DatabaseBinding,
    KVNamespace,
    KVNamespaceBinding,
    PlainTextBinding,
    ScriptUploadResult,
    SecretTextBinding,
    WorkerDomain,
    Zone,
)
from .api_client import CloudflareClient
from .multipart import ScriptUploadForm
from .domains import DomainBinder, DomainBinding, make_extractor, registrable_domain

__all__ = [
    "CloudflareAPIError",
    "Binding",
    "CloudAccount",
    "D1Database",
    "D1DatabaseBinding",
    "KVNamespace",
    "KVNamespaceBinding",
    "PlainTextBinding",
    "ScriptUploadResult",
    "SecretTextBinding",
    "WorkerDomain",
    "Zone",
    "CloudflareClient",
    "ScriptUploadForm",
    "DomainBinder",
    "DomainBinding",
    "make_extractor",
    "registrable_domain",
]
