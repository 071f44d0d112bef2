import logging
from typing import List, Optional

from fastapi import HTTPException

from ..core.metrics import MATCHED_UNITS
from ..data.base import GeocodeClient, CadastreClient, MutationsClient, UpstreamError
from ..data.geocode_client import geocode_client
from ..data.cadastre_client import cadastre_client
from ..data.mutations_client import mutations_client
from .matcher import MatchedTransaction, match

logger = logging.getLogger(__name__)

def summarize(units: List[MatchedTransaction]) -> dict:
    """Price and surface statistics over matched sales (zeros when empty)."""
    if not units:
        return {
            "count": 0, "avg_price": 0, "avg_price_m2": 0,
            "min_price": 0, "max_price": 0,
            "min_price_m2": 0, "max_price_m2": 0, "avg_surface": 0,
        }
    prices = [u.price for u in units]
    per_m2 = [u.price_per_m2 for u in units]
    surfaces = [u.surface_m2 for u in units]
    return {
        "count": len(units),
        "avg_price": round(sum(prices) / len(prices)),
        "avg_price_m2": round(sum(per_m2) / len(per_m2)),
        "min_price": round(min(prices)),
        "max_price": round(max(prices)),
        "min_price_m2": min(per_m2),
        "max_price_m2": max(per_m2),
        "avg_surface": round(sum(surfaces) / len(surfaces)),
    }

def unit_payload(u: MatchedTransaction) -> dict:
    return {
        "id": u.id,
        "date": u.date.isoformat() if u.date else None,
        "price": u.price,
        "surface": u.surface_m2,
        "price_m2": u.price_per_m2,
        "rooms": u.rooms,
        "type": u.property_type_label,
        "floor": u.floor,
        "confidence": u.confidence,
    }

class UnitsService:
    """
    Orchestrates:
      address → BAN geocode → IGN section → Etalab mutations → match
    Every hop is sequential and uncached; any upstream failure aborts the
    lookup before matching.
    """
    def __init__(
        self,
        geo: Optional[GeocodeClient] = None,
        cadastre: Optional[CadastreClient] = None,
        mutations: Optional[MutationsClient] = None,
    ):
        self.geo = geo or geocode_client()
        self.cadastre = cadastre or cadastre_client()
        self.mutations = mutations or mutations_client()

    async def lookup(self, raw_address: str) -> dict:
        try:
            # 1) Geocode (free text -> number, street, INSEE code, point)
            query = await self.geo.resolve(raw_address)
            if query is None:
                raise HTTPException(status_code=404, detail="Address not found")

            # 2) Cadastral section containing the point
            section = await self.cadastre.section_at(query.coordinates)

            # 3) Every mutation of the section
            records = []
            if section is not None:
                records = await self.mutations.section_mutations(query.city_code, section.id)
        except UpstreamError as exc:
            raise HTTPException(
                status_code=502, detail=f"Upstream service unavailable: {exc.source}"
            ) from exc

        # 4) Keep sales at this address
        units = match(query, records)
        MATCHED_UNITS.observe(len(units))
        logger.info(
            "units lookup: section=%s records=%d matched=%d",
            section.id if section else None, len(records), len(units),
        )

        return {
            "address": {
                "label": query.label,
                "city": query.city,
                "postcode": query.postcode,
                "city_code": query.city_code,
                "coordinates": {"lat": query.coordinates.lat, "lon": query.coordinates.lon},
            },
            "section": section.id if section else None,
            "units": [unit_payload(u) for u in units],
            "summary": summarize(units),
        }
