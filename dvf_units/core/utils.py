import math
import re
from datetime import date
from typing import Any

_NON_ALNUM = re.compile(r"[^a-z0-9]")

def normalize_address(addr: str) -> str:
    """
    Minimal normalization so cache keys & seeds are stable:
    - trim whitespace
    - lowercase
    - collapse multiple spaces
    """
    return " ".join(addr.strip().lower().split())

def normalize_street(name: str | None) -> str:
    """
    Comparable form of a street name: lowercase, every character outside
    [a-z0-9] removed. "RUE AUGUSTE-BLANQUI" -> "rueaugusteblanqui".
    Accented letters are dropped, not folded, on both sides alike.
    """
    return _NON_ALNUM.sub("", (name or "").lower())

def parse_float(value: Any) -> float | None:
    """Finite float from a number or numeric string, else None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        out = float(value.strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return None
    return out if math.isfinite(out) else None

def parse_int(value: Any) -> int | None:
    """Integer from "2", 2, 2.0 or "2.0"; None for anything fractional or junk."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    f = parse_float(value)
    if f is None or not f.is_integer():
        return None
    return int(f)

def parse_date(value: Any) -> date | None:
    """Calendar date from an ISO "YYYY-MM-DD[...]" string."""
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or len(value) < 10:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None

def fnv1a_32(s: str) -> int:
    """Deterministic, fast hash for seed generation."""
    h = 0x811c9dc5
    for c in s.encode("utf-8"):
        h ^= c
        h = (h * 0x01000193) & 0xFFFFFFFF
    return h

def seeded_rand(seed: int, n: int = 1) -> list[float]:
    """
    Stateless pseudo-random generator (Mulberry32-like) so
    same seed → same outputs without storing PRNG state.
    """
    out = []
    t = (seed + 0x6D2B79F5) & 0xFFFFFFFF
    for _ in range(n):
        t = (t ^ (t >> 15)) * (t | 1) & 0xFFFFFFFF
        t ^= t + ((t ^ (t >> 7)) * (t | 61) & 0xFFFFFFFF)
        r = ((t ^ (t >> 14)) & 0xFFFFFFFF) / 4294967296.0
        out.append(r)
    return out
