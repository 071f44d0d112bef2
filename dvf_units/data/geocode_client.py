import re
from typing import List, Optional
import httpx
from .base import GeocodeClient, QueryAddress, AddressCandidate, GeoPoint, UpstreamError
from .http import get_json
from ..core.config import settings
from ..core.utils import fnv1a_32, seeded_rand

_LEADING_NUMBER = re.compile(r"^\s*(\d+)\s*(bis|ter|quater)?\b[\s,]*(.*)$", re.IGNORECASE)

class MockGeocode(GeocodeClient):
    """
    Offline geocoder: splits "<number> [rep] <street>, <city>" and derives
    a stable point inside metropolitan France from the address hash.
    """
    async def resolve(self, address: str) -> Optional[QueryAddress]:
        candidates = await self.search(address, limit=1)
        if not candidates:
            return None
        c = candidates[0]
        m = _LEADING_NUMBER.match(address)
        return QueryAddress(
            label=c.label,
            street_name=c.street or "",
            city_code=c.city_code or "",
            coordinates=GeoPoint(lat=c.lat, lon=c.lon),
            house_number=c.house_number,
            repetition=(m.group(2).lower() if m and m.group(2) else None),
            city=c.city,
            postcode=c.postcode,
        )

    async def search(self, query: str, limit: int = 5) -> List[AddressCandidate]:
        if not query.strip():
            return []
        seed = fnv1a_32(query.lower())
        m = _LEADING_NUMBER.match(query)
        number = m.group(1) if m else None
        rest = m.group(3) if m else query
        street, _, city = rest.partition(",")
        street = " ".join(w.capitalize() for w in street.split())
        city = city.strip().title() or "Paris"
        # Metropolitan bounding box, roughly
        lat = 42.5 + seeded_rand(seed, 1)[0] * 8.5
        lon = -4.5 + seeded_rand(seed + 1, 1)[0] * 12.5
        city_code = f"{75101 + int(seeded_rand(seed + 2, 1)[0] * 20)}"
        label = f"{number + ' ' if number else ''}{street} {city}".strip()
        return [AddressCandidate(
            label=label, lat=round(lat, 6), lon=round(lon, 6), score=0.9,
            house_number=number, street=street, postcode=f"750{city_code[-2:]}",
            city=city, city_code=city_code,
        )][:limit]

class HttpGeocode(GeocodeClient):
    """
    Base Adresse Nationale (api-adresse.data.gouv.fr).
    Features are GeoJSON: coordinates are [lon, lat].
    """
    def __init__(self, base_url: str, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.transport = transport

    async def _features(self, query: str, limit: int) -> list[dict]:
        j = await get_json(
            "ban", f"{self.base_url}/search/", params={"q": query, "limit": limit},
            transport=self.transport,
        )
        feats = (j or {}).get("features")
        if feats is None:
            raise UpstreamError("ban", "response has no features")
        return feats

    @staticmethod
    def _candidate(feature: dict) -> AddressCandidate:
        props = feature.get("properties") or {}
        coords = (feature.get("geometry") or {}).get("coordinates")
        if not isinstance(coords, list) or len(coords) != 2:
            raise UpstreamError("ban", "feature has no point")
        lon, lat = coords
        return AddressCandidate(
            label=props.get("label", ""),
            lat=lat, lon=lon,
            score=float(props.get("score") or 0.0),
            house_number=props.get("housenumber"),
            # "street"-type hits carry the street in `name` only
            street=props.get("street") or (props.get("name") if props.get("type") == "street" else None),
            postcode=props.get("postcode"),
            city=props.get("city"),
            city_code=props.get("citycode"),
        )

    async def resolve(self, address: str) -> Optional[QueryAddress]:
        feats = await self._features(address, limit=1)
        if not feats:
            return None
        c = self._candidate(feats[0])
        props = feats[0].get("properties") or {}
        return QueryAddress(
            label=c.label,
            street_name=c.street or "",
            city_code=c.city_code or "",
            coordinates=GeoPoint(lat=c.lat, lon=c.lon),
            house_number=c.house_number,
            repetition=props.get("rep"),
            city=c.city,
            postcode=c.postcode,
        )

    async def search(self, query: str, limit: int = 5) -> List[AddressCandidate]:
        return [self._candidate(f) for f in await self._features(query, limit)]

def geocode_client() -> GeocodeClient:
    """
    Factory picks mock or http based on env flags.
    """
    if settings.GEO_PROVIDER == "mock":
        return MockGeocode()
    return HttpGeocode(settings.BAN_BASE_URL)
