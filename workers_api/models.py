"""
Pydantic models for Cloudflare API payloads and worker bindings.
"""
from typing import Literal, Optional, Union
from pydantic import BaseModel, ConfigDict


class CloudAccount(BaseModel):
    """Cloudflare account every provisioning call is scoped to"""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""


class KVNamespace(BaseModel):
    """Workers KV namespace"""
    id: str
    title: str = ""


class D1Database(BaseModel):
    """D1 database"""
    uuid: str
    name: str = ""


class Zone(BaseModel):
    """DNS zone"""
    id: str
    name: str
    status: Optional[str] = None


class WorkerDomain(BaseModel):
    """Custom domain attached to a worker"""
    id: Optional[str] = None
    hostname: str
    service: Optional[str] = None
    environment: Optional[str] = None
    zone_id: Optional[str] = None


class ScriptUploadResult(BaseModel):
    """Result of a worker script upload"""
    id: Optional[str] = None
    etag: Optional[str] = None


# Worker bindings, serialized into the upload metadata

class PlainTextBinding(BaseModel):
    """Plain text environment variable"""
    type: Literal["plain_text"] = "plain_text"
    name: str
    text: str


class SecretTextBinding(BaseModel):
    """Encrypted environment variable"""
    type: Literal["secret_text"] = "secret_text"
    name: str
    text: str


class KVNamespaceBinding(BaseModel):
    """KV namespace binding"""
    type: Literal["kv_namespace"] = "kv_namespace"
    name: str
    namespace_id: str


class D1DatabaseBinding(BaseModel):
    """D1 database binding"""
    type: Literal["d1"] = "d1"
    name: str
    id: str


Binding = Union[PlainTextBinding, SecretTextBinding, KVNamespaceBinding, D1DatabaseBinding]
