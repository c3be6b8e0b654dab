"""Download of the worker bundle that gets uploaded"""

import logging
from pathlib import Path
from typing import Optional

import httpx

from errors import UploadError
from settings import CONNECT_TIMEOUT, MAIN_MODULE, REQUEST_TIMEOUT

logger = logging.getLogger(__name__)


async def fetch_worker_bundle(
    url: str,
    dest_dir: Path,
    client: Optional[httpx.AsyncClient] = None,
) -> Path:
    """Stream the worker bundle from ``url`` into ``dest_dir``

    Args:
        url: Where the bundle is published
        dest_dir: Directory to write the bundle into
        client: Optional HTTP client to reuse

    Returns:
        Path of the downloaded bundle

    Raises:
        UploadError: If the download fails; no partial file is left behind
    """
    dest = Path(dest_dir) / MAIN_MODULE
    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(
            timeout=httpx.Timeout(REQUEST_TIMEOUT, connect=CONNECT_TIMEOUT),
            follow_redirects=True,
        )

    try:
        async with client.stream("GET", url) as response:
            if response.status_code != 200:
                raise UploadError(f"Could not download worker bundle from {url} (HTTP {response.status_code})")
            with open(dest, "wb") as f:
                async for chunk in response.aiter_bytes():
                    f.write(chunk)
    except httpx.HTTPError as e:
        dest.unlink(missing_ok=True)
        raise UploadError(f"Could not download worker bundle from {url}: {e}") from e
    except OSError as e:
        dest.unlink(missing_ok=True)
        raise UploadError(f"Could not write worker bundle to {dest}: {e}") from e
    finally:
        if owns_client:
            await client.aclose()

    logger.info(f"Worker bundle downloaded to {dest}")
    return dest
