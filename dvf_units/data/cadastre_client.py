import json
from typing import Optional
import httpx
from .base import CadastreClient, CadastralSection, GeoPoint, UpstreamError
from .http import get_json
from ..core.config import settings
from ..core.utils import fnv1a_32, seeded_rand

def section_id(prefix: Optional[str], section: str) -> str:
    """DVF keys sections as 3-char absorbed-commune prefix + section code."""
    return f"{prefix or '000'}{section}"

class MockCadastre(CadastreClient):
    """
    Deterministic section from rounded coordinates, so nearby points
    land in the same section.
    """
    async def section_at(self, point: GeoPoint) -> Optional[CadastralSection]:
        seed = fnv1a_32(f"{round(point.lat, 3)},{round(point.lon, 3)}")
        r1, r2 = seeded_rand(seed, 2)
        code = chr(ord("A") + int(r1 * 26)) + chr(ord("A") + int(r2 * 26))
        return CadastralSection(id=section_id(None, code), city_code="", section=code)

class HttpCadastre(CadastreClient):
    """
    IGN API Carto, cadastre module. `division` returns the cadastral
    section(s) whose geometry contains the point.
    """
    def __init__(self, base_url: str, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.transport = transport

    async def section_at(self, point: GeoPoint) -> Optional[CadastralSection]:
        geom = json.dumps({"type": "Point", "coordinates": [point.lon, point.lat]})
        j = await get_json(
            "ign", f"{self.base_url}/division", params={"geom": geom},
            transport=self.transport,
        )
        feats = (j or {}).get("features")
        if feats is None:
            raise UpstreamError("ign", "response has no features")
        if not feats:
            return None
        props = feats[0].get("properties", {})
        code = props.get("section")
        if not code:
            return None
        prefix = props.get("com_abs") or "000"
        return CadastralSection(
            id=section_id(prefix, code),
            city_code=props.get("code_insee") or "",
            prefix=prefix,
            section=code,
        )

def cadastre_client() -> CadastreClient:
    if settings.CADASTRE_PROVIDER == "mock":
        return MockCadastre()
    return HttpCadastre(settings.CADASTRE_BASE_URL)
