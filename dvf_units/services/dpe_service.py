import logging
from dataclasses import asdict
from typing import Optional

from ..data.base import DpeClient, UpstreamError
from ..data.dpe_client import dpe_client

logger = logging.getLogger(__name__)

class DpeService:
    """
    Energy label for the report. The DPE is an optional section, so an
    ADEME outage degrades to "not found" instead of failing the request.
    """
    def __init__(self, client: Optional[DpeClient] = None):
        self.client = client or dpe_client()

    async def lookup(self, address: str) -> dict:
        try:
            best = await self.client.best_match(address)
        except UpstreamError as exc:
            logger.warning("DPE lookup degraded: %s", exc.message, extra={"source": exc.source})
            best = None
        if best is None:
            return {"found": False, "results": []}
        return {"found": True, **asdict(best)}
