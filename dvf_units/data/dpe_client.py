from typing import Any, Dict, List, Optional
import httpx
from .base import DpeClient, DpeRecord
from .http import get_json
from ..core.utils import fnv1a_32, seeded_rand, parse_float
from ..core.config import settings

ENERGY_CLASSES = "ABCDEFG"

def dpe_from_row(row: Dict[str, Any]) -> DpeRecord:
    """Map an ADEME `dpe-france` line onto DpeRecord; integers parsed leniently."""
    def as_int(key: str) -> Optional[int]:
        f = parse_float(row.get(key))
        return int(f) if f is not None else None

    return DpeRecord(
        geo_score=parse_float(row.get("geo_score")) or 0.0,
        energy_class=row.get("classe_consommation_energie") or None,
        ghg_class=row.get("classe_estimation_ges") or None,
        energy_consumption=as_int("consommation_energie"),
        ghg_emission=as_int("estimation_ges"),
        construction_year=as_int("annee_construction"),
        surface=as_int("surface_thermique_lot"),
        building_type=row.get("tr002_type_batiment_description") or None,
        established_on=row.get("date_etablissement_dpe") or None,
        dpe_number=row.get("numero_dpe") or None,
        dpe_address=row.get("geo_adresse") or None,
    )

def pick_best(rows: List[Dict[str, Any]], min_score: float) -> Optional[DpeRecord]:
    """Highest geo_score at or above `min_score`; first one wins ties."""
    best = None
    for rec in map(dpe_from_row, rows):
        if rec.geo_score < min_score:
            continue
        if best is None or rec.geo_score > best.geo_score:
            best = rec
    return best

class MockDpe(DpeClient):
    """
    Synthetic certificate derived from the address hash.
    """
    async def best_match(self, address: str) -> Optional[DpeRecord]:
        seed = fnv1a_32(address.lower())
        r = seeded_rand(seed, 4)
        idx = int(r[0] * len(ENERGY_CLASSES))
        return DpeRecord(
            geo_score=round(0.5 + r[1] * 0.5, 2),
            energy_class=ENERGY_CLASSES[idx],
            ghg_class=ENERGY_CLASSES[min(idx + 1, len(ENERGY_CLASSES) - 1)],
            energy_consumption=70 + idx * 60,
            ghg_emission=5 + idx * 12,
            construction_year=1900 + int(r[2] * 120),
            surface=20 + int(r[3] * 130),
            dpe_address=address,
        )

class HttpDpe(DpeClient):
    """
    ADEME data-fair full-text search over the DPE dataset.
    """
    def __init__(self, base_url: str, dataset: str, min_score: float,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.dataset = dataset
        self.min_score = min_score
        self.transport = transport

    async def best_match(self, address: str) -> Optional[DpeRecord]:
        j = await get_json(
            "ademe", f"{self.base_url}/datasets/{self.dataset}/lines",
            params={"q": address, "size": 5}, transport=self.transport,
        )
        rows = (j or {}).get("results") or []
        return pick_best([r for r in rows if isinstance(r, dict)], self.min_score)

def dpe_client() -> DpeClient:
    if settings.DPE_PROVIDER == "mock":
        return MockDpe()
    return HttpDpe(settings.ADEME_BASE_URL, settings.DPE_DATASET, settings.DPE_MIN_GEO_SCORE)
