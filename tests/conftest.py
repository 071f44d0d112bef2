from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import date

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from dvf_units.core.cache import cache
from dvf_units.core.security import rate_limit
from dvf_units.data.base import (
    AddressCandidate,
    CadastralSection,
    DpeRecord,
    GeoPoint,
    QueryAddress,
    RawMutationRecord,
    UpstreamError,
)
from dvf_units.main import app
from dvf_units.routers import address as address_router
from dvf_units.routers import dpe as dpe_router
from dvf_units.routers import units as units_router
from dvf_units.services.address_service import AddressService
from dvf_units.services.dpe_service import DpeService
from dvf_units.services.units_service import UnitsService


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def make_query(house_number: str | None = "36", street: str = "Rue Auguste Blanqui",
               repetition: str | None = None) -> QueryAddress:
    label = f"{house_number + ' ' if house_number else ''}{street} 75013 Paris"
    return QueryAddress(
        label=label,
        street_name=street,
        city_code="75113",
        coordinates=GeoPoint(lat=48.8309, lon=2.3524),
        house_number=house_number,
        repetition=repetition,
        city="Paris",
        postcode="75013",
    )


def make_record(**overrides) -> RawMutationRecord:
    """A qualifying sale at 36 RUE AUGUSTE BLANQUI unless overridden."""
    fields = dict(
        mutation_id="2023-1",
        mutation_date=date(2023, 6, 15),
        nature="Vente",
        declared_value=250000.0,
        built_surface_m2=80.0,
        main_rooms=3,
        property_type_code=2,
        house_number=36.0,
        address_suffix=None,
        street_name="RUE AUGUSTE BLANQUI",
    )
    fields.update(overrides)
    return RawMutationRecord(**fields)


# ---------------------------------------------------------------------------
# In-memory upstream doubles
# ---------------------------------------------------------------------------


class FakeGeocode:
    def __init__(self, query: QueryAddress | None = None, candidates=None, error: bool = False):
        self.query = query
        self.candidates = candidates or []
        self.error = error
        self.search_calls = 0

    async def resolve(self, address: str):
        if self.error:
            raise UpstreamError("ban", "boom")
        return self.query

    async def search(self, query: str, limit: int = 5):
        self.search_calls += 1
        if self.error:
            raise UpstreamError("ban", "boom")
        return self.candidates[:limit]


class FakeCadastre:
    def __init__(self, section: CadastralSection | None, error: bool = False):
        self.section = section
        self.error = error

    async def section_at(self, point: GeoPoint):
        if self.error:
            raise UpstreamError("ign", "boom")
        return self.section


class FakeMutations:
    def __init__(self, records=None, error: bool = False):
        self.records = records or []
        self.error = error
        self.calls: list[tuple[str, str]] = []

    async def section_mutations(self, city_code: str, section_id: str):
        self.calls.append((city_code, section_id))
        if self.error:
            raise UpstreamError("dvf", "boom")
        return list(self.records)


class FakeDpe:
    def __init__(self, record: DpeRecord | None = None, error: bool = False):
        self.record = record
        self.error = error

    async def best_match(self, address: str):
        if self.error:
            raise UpstreamError("ademe", "boom")
        return self.record


SECTION = CadastralSection(id="000AB", city_code="75113", section="AB")

CANDIDATE = AddressCandidate(
    label="36 Rue Auguste Blanqui 75013 Paris", lat=48.8309, lon=2.3524, score=0.97,
    house_number="36", street="Rue Auguste Blanqui", postcode="75013", city="Paris",
    city_code="75113",
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def upstream():
    """Mutable bag of doubles wired into every service the app builds."""
    class Upstream:
        geo = FakeGeocode(make_query(), candidates=[CANDIDATE])
        cadastre = FakeCadastre(SECTION)
        mutations = FakeMutations([make_record()])
        dpe = FakeDpe()
    return Upstream()


@pytest_asyncio.fixture
async def client(upstream) -> AsyncGenerator[AsyncClient, None]:
    app.dependency_overrides[units_router.service_dep] = lambda: UnitsService(
        geo=upstream.geo, cadastre=upstream.cadastre, mutations=upstream.mutations,
    )
    app.dependency_overrides[address_router.service_dep] = lambda: AddressService(geo=upstream.geo)
    app.dependency_overrides[dpe_router.service_dep] = lambda: DpeService(client=upstream.dpe)
    app.dependency_overrides[rate_limit] = lambda: None

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
