"""Worker name availability check"""

import logging
from enum import Enum

from workers_api import CloudflareAPIError
from .models import DeployContext

logger = logging.getLogger(__name__)

# workers.api.error.script_not_found
SCRIPT_NOT_FOUND_CODE = 10007


class NameAvailability(Enum):
    AVAILABLE = "available"
    TAKEN = "taken"
    # The lookup itself failed; nothing is known about the name
    UNKNOWN = "unknown"


async def check_name_availability(ctx: DeployContext, name: str) -> NameAvailability:
    """Look up a worker script by name

    Only a confirmed not-found counts as available. Network failures and
    other API errors are reported as UNKNOWN instead of being read as
    "available".
    """
    try:
        await ctx.client.get_script_settings(ctx.account_id, name)
    except CloudflareAPIError as e:
        if e.status_code == 404 or SCRIPT_NOT_FOUND_CODE in e.codes:
            return NameAvailability.AVAILABLE
        logger.warning(f"Could not check availability of worker name '{name}': {e}")
        return NameAvailability.UNKNOWN
    return NameAvailability.TAKEN
