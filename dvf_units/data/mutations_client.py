from datetime import date, timedelta
from typing import List, Optional
import httpx
from .base import MutationsClient, RawMutationRecord, UpstreamError
from .http import get_json
from ..core.utils import fnv1a_32, seeded_rand
from ..core.config import settings

MOCK_STREETS = [
    "RUE DE LA PAIX", "AVENUE VICTOR HUGO", "RUE AUGUSTE BLANQUI",
    "BOULEVARD VOLTAIRE", "RUE DE PARIS",
]

MOCK_NATURES = ["Vente", "Vente", "Vente", "Vente en l'état futur d'achèvement", "Echange"]

class MockMutations(MutationsClient):
    """
    Synthetic section history in Etalab row format, run through the same
    parsing boundary as the real client. Plausible but fake.
    """
    async def section_mutations(self, city_code: str, section_id: str) -> List[RawMutationRecord]:
        seed = fnv1a_32(f"{city_code}/{section_id}")
        n = 10 + int(seeded_rand(seed, 1)[0] * 30)
        today = date.today()
        rows = []
        for i in range(n):
            r = seeded_rand(seed + 31 * i, 6)
            rows.append({
                "id_mutation": f"{today.year}-{seed % 100000}-{i}",
                "date_mutation": (today - timedelta(days=int(r[0] * 365 * 5))).isoformat(),
                "nature_mutation": MOCK_NATURES[int(r[1] * len(MOCK_NATURES))],
                "valeur_fonciere": str(90_000 + int(r[2] * 900_000)),
                "surface_reelle_bati": str(8 + int(r[3] * 140)),
                "nombre_pieces_principales": str(1 + int(r[3] * 6)),
                "code_type_local": str(1 + int(r[4] * 4)),  # 1..4, 3/4 get filtered
                "adresse_numero": f"{1 + int(r[5] * 40)}.0",
                "adresse_suffixe": None,
                "adresse_nom_voie": MOCK_STREETS[i % len(MOCK_STREETS)],
            })
        return [RawMutationRecord.from_api(row) for row in rows]

class HttpMutations(MutationsClient):
    """
    Etalab DVF app API. `mutations3/{citycode}/{section}` returns every
    mutation row of the section, one row per (mutation, local).
    """
    def __init__(self, base_url: str, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.transport = transport

    async def section_mutations(self, city_code: str, section_id: str) -> List[RawMutationRecord]:
        j = await get_json(
            "dvf", f"{self.base_url}/mutations3/{city_code}/{section_id}",
            transport=self.transport, allow_statuses=(404,),
        )
        if j is None:
            return []
        rows = (j.get("mutations") or []) if isinstance(j, dict) else None
        if not isinstance(rows, list):
            raise UpstreamError("dvf", "response has no mutations list")
        return [RawMutationRecord.from_api(row) for row in rows if isinstance(row, dict)]

def mutations_client() -> MutationsClient:
    if settings.DVF_PROVIDER == "mock":
        return MockMutations()
    return HttpMutations(settings.DVF_BASE_URL)
