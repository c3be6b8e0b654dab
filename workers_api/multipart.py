"""Multipart body for the Workers script upload endpoint

The endpoint expects exactly two parts, in this order:

1. ``metadata`` (``application/json``): main module, compatibility settings
   and bindings
2. ``<main_module>`` (``application/javascript+module``): the bundle itself,
   with the module name as both field name and filename
"""

import json
import logging
import secrets
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import httpx

from errors import UploadError
from .models import Binding

logger = logging.getLogger(__name__)

METADATA_FIELD = "metadata"
METADATA_FILENAME = "metadata.json"
METADATA_CONTENT_TYPE = "application/json"
MODULE_CONTENT_TYPE = "application/javascript+module"


class ScriptUploadForm:
    """Metadata plus bundle for a single worker upload"""

    def __init__(
        self,
        main_module: str,
        bindings: Sequence[Binding],
        compatibility_date: str,
        compatibility_flags: Sequence[str],
        bundle_path: Path,
    ):
        self.main_module = main_module
        self.bindings = list(bindings)
        self.compatibility_date = compatibility_date
        self.compatibility_flags = list(compatibility_flags)
        self.bundle_path = Path(bundle_path)

    def metadata(self) -> Dict[str, Any]:
        return {
            "main_module": self.main_module,
            "bindings": [binding.model_dump() for binding in self.bindings],
            "compatibility_date": self.compatibility_date,
            "compatibility_flags": self.compatibility_flags,
        }

    def _read_bundle(self) -> bytes:
        try:
            return self.bundle_path.read_bytes()
        except OSError as e:
            raise UploadError(f"Could not read worker bundle '{self.bundle_path}': {e}") from e

    def encode(self, boundary: Optional[str] = None) -> Tuple[bytes, str]:
        """Build the complete request body

        The bundle is read in full before anything is assembled, so a read
        failure never leaves a partial body behind.

        Args:
            boundary: Multipart boundary; random when omitted

        Returns:
            Tuple of (body, content_type header value)

        Raises:
            UploadError: If the bundle cannot be read
        """
        bundle = self._read_bundle()
        metadata_json = json.dumps(self.metadata(), separators=(",", ":")).encode("utf-8")

        boundary = boundary or secrets.token_hex(16)
        content_type = f"multipart/form-data; boundary={boundary}"

        files: List[Tuple[str, Tuple[str, bytes, str]]] = [
            (METADATA_FIELD, (METADATA_FILENAME, metadata_json, METADATA_CONTENT_TYPE)),
            (self.main_module, (self.main_module, bundle, MODULE_CONTENT_TYPE)),
        ]
        request = httpx.Request(
            "PUT",
            "https://upload.invalid/",
            files=files,
            headers={"Content-Type": content_type},
        )
        body = request.read()

        logger.debug(
            f"Encoded worker upload: {len(self.bindings)} bindings, "
            f"{len(bundle)} bundle bytes, {len(body)} body bytes"
        )
        return body, content_type
