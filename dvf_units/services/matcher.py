"""
Address-to-transaction matching.

A cadastral section holds every sale of a few dozen buildings. DVF has no key
tying a mutation to a building other than its textual address, so the query
address is reconciled against each row: exact house number (numeric, to
absorb Etalab's "36.0"), then lenient street containment.
"""
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional

from ..core.utils import normalize_street
from ..data.base import QueryAddress, RawMutationRecord

MIN_SURFACE_M2 = 9.0
PROPERTY_TYPE_LABELS = {1: "Maison", 2: "Appartement"}

# BAN repetition index -> DVF `adresse_suffixe` letter
REPETITION_SUFFIXES = {"bis": "B", "ter": "T", "quater": "Q", "quinquies": "C"}

@dataclass(frozen=True)
class MatchedTransaction:
    id: str
    date: Optional[date]
    price: float
    surface_m2: float
    rooms: int
    property_type_label: str
    confidence: str                # "high" | "low"
    floor: Optional[int] = None    # never present in DVF sale rows

    @property
    def price_per_m2(self) -> int:
        return round(self.price / self.surface_m2)

def _is_eligible(rec: RawMutationRecord) -> bool:
    """Sale of a house or apartment with a usable price and living surface."""
    if "Vente" not in rec.nature:
        return False
    if rec.declared_value is None or rec.declared_value <= 0:
        return False
    if rec.built_surface_m2 is None or rec.built_surface_m2 <= MIN_SURFACE_M2:
        return False
    return rec.property_type_code in PROPERTY_TYPE_LABELS

def _suffix_agrees(query: QueryAddress, rec: RawMutationRecord) -> bool:
    wanted = REPETITION_SUFFIXES.get((query.repetition or "").lower())
    have = (rec.address_suffix or "").upper()[:1] or None
    return wanted == have

def address_confidence(query: QueryAddress, rec: RawMutationRecord) -> Optional[str]:
    """
    None when the record is at another address, else "high" or "low".

    With a query house number the numbers must be equal; a record
    without a number cannot match. Streets must contain one another once
    normalized; a blank street on either side passes as "low". "high" needs
    numbers, normalized streets and repetition suffix all equal.
    """
    query_number = None
    if query.house_number:
        try:
            query_number = float(query.house_number)
        except ValueError:
            query_number = None
        if query_number is None or rec.house_number != query_number:
            return None

    rec_street = normalize_street(rec.street_name)
    query_street = normalize_street(query.street_name)
    # An empty side is contained in anything: kept, but never "high"
    if rec_street not in query_street and query_street not in rec_street:
        return None

    if (query_number is not None and rec_street and rec_street == query_street
            and _suffix_agrees(query, rec)):
        return "high"
    return "low"

def match(query: QueryAddress, records: Iterable[RawMutationRecord]) -> List[MatchedTransaction]:
    """
    Transactions from `records` that plausibly belong to the queried
    building, most recent first. Ineligible or unmatched rows are
    dropped silently; raises TypeError only if `records` is not iterable.
    """
    if records is None:
        raise TypeError("records must be an iterable of RawMutationRecord, not None")

    out: List[MatchedTransaction] = []
    for rec in records:
        if not _is_eligible(rec):
            continue
        confidence = address_confidence(query, rec)
        if confidence is None:
            continue
        out.append(MatchedTransaction(
            id=rec.mutation_id,
            date=rec.mutation_date,
            price=rec.declared_value,
            surface_m2=rec.built_surface_m2,
            rooms=rec.main_rooms or 0,
            property_type_label=PROPERTY_TYPE_LABELS[rec.property_type_code],
            confidence=confidence,
        ))

    # Stable sort: newest first, undated rows last
    out.sort(key=lambda t: t.date.toordinal() if t.date else 0, reverse=True)
    return out
