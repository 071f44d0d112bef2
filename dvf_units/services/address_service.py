import json
from dataclasses import asdict
from typing import Optional

from fastapi import HTTPException

from ..core.cache import cache
from ..core.utils import normalize_address
from ..data.base import GeocodeClient, UpstreamError
from ..data.geocode_client import geocode_client

MIN_QUERY_LENGTH = 3

class AddressService:
    """
    Autocomplete over BAN. Suggestions are cached by normalized query
    since the form fires one request per keystroke.
    """
    def __init__(self, geo: Optional[GeocodeClient] = None):
        self.geo = geo or geocode_client()

    async def suggest(self, q: str, limit: int = 5) -> tuple[list[dict], bool]:
        q_norm = normalize_address(q)
        if len(q_norm) < MIN_QUERY_LENGTH:
            raise HTTPException(status_code=400, detail="Query must be at least 3 characters")

        cache_key = f"address:{limit}:{q_norm}"
        cached = cache.get(cache_key)
        if cached:
            return json.loads(cached), True

        try:
            candidates = await self.geo.search(q_norm, limit=limit)
        except UpstreamError as exc:
            raise HTTPException(status_code=502, detail="Address service unavailable") from exc

        results = [asdict(c) for c in candidates]
        cache.set(cache_key, json.dumps(results, separators=(',',':')))
        return results, False
