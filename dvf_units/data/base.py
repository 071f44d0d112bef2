from typing import Protocol, List, Optional, Any, Dict
from dataclasses import dataclass
from datetime import date

from ..core.utils import parse_float, parse_int, parse_date

# ----- Errors -----

class UpstreamError(Exception):
    """A public data API could not be reached or answered garbage."""
    def __init__(self, source: str, message: str):
        super().__init__(f"{source}: {message}")
        self.source = source
        self.message = message

# ----- Data shapes (thin & explicit) -----

@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lon: float

@dataclass(frozen=True)
class QueryAddress:
    """Best BAN candidate for a free-text address."""
    label: str
    street_name: str
    city_code: str                    # INSEE code, not the postcode
    coordinates: GeoPoint
    house_number: Optional[str] = None
    repetition: Optional[str] = None  # BAN "rep": bis, ter, ...
    city: Optional[str] = None
    postcode: Optional[str] = None

@dataclass(frozen=True)
class AddressCandidate:
    label: str
    lat: float
    lon: float
    score: float
    house_number: Optional[str] = None
    street: Optional[str] = None
    postcode: Optional[str] = None
    city: Optional[str] = None
    city_code: Optional[str] = None

@dataclass(frozen=True)
class CadastralSection:
    id: str              # prefix + section, e.g. "000AB"
    city_code: str
    prefix: str = "000"
    section: str = ""

@dataclass(frozen=True)
class RawMutationRecord:
    """
    One DVF row, typed on ingest. Every field except `mutation_id` may be
    None; numbers that fail to parse are stored as None rather than raising.
    """
    mutation_id: str
    mutation_date: Optional[date] = None
    nature: str = ""
    declared_value: Optional[float] = None
    built_surface_m2: Optional[float] = None
    main_rooms: Optional[int] = None
    property_type_code: Optional[int] = None
    house_number: Optional[float] = None
    address_suffix: Optional[str] = None
    street_name: Optional[str] = None

    @classmethod
    def from_api(cls, row: Dict[str, Any]) -> "RawMutationRecord":
        """Build from an Etalab `mutations3` row ("36.0"-style numbers included)."""
        suffix = str(row.get("adresse_suffixe") or "").strip()
        return cls(
            mutation_id=str(row.get("id_mutation") or ""),
            mutation_date=parse_date(row.get("date_mutation")),
            nature=row.get("nature_mutation") or "",
            declared_value=parse_float(row.get("valeur_fonciere")),
            built_surface_m2=parse_float(row.get("surface_reelle_bati")),
            main_rooms=parse_int(row.get("nombre_pieces_principales")),
            property_type_code=parse_int(row.get("code_type_local")),
            house_number=parse_float(row.get("adresse_numero")),
            address_suffix=suffix or None,
            street_name=row.get("adresse_nom_voie"),
        )

@dataclass(frozen=True)
class DpeRecord:
    """Energy performance certificate (ADEME), best geo match only."""
    geo_score: float
    energy_class: Optional[str] = None
    ghg_class: Optional[str] = None
    energy_consumption: Optional[int] = None
    ghg_emission: Optional[int] = None
    construction_year: Optional[int] = None
    surface: Optional[int] = None
    building_type: Optional[str] = None
    established_on: Optional[str] = None
    dpe_number: Optional[str] = None
    dpe_address: Optional[str] = None

# ----- Protocols (interfaces) -----

class GeocodeClient(Protocol):
    async def resolve(self, address: str) -> Optional[QueryAddress]: ...
    async def search(self, query: str, limit: int = 5) -> List[AddressCandidate]: ...

class CadastreClient(Protocol):
    async def section_at(self, point: GeoPoint) -> Optional[CadastralSection]: ...

class MutationsClient(Protocol):
    async def section_mutations(self, city_code: str, section_id: str) -> List[RawMutationRecord]: ...

class DpeClient(Protocol):
    async def best_match(self, address: str) -> Optional[DpeRecord]: ...
