from typing import Literal
from pydantic import BaseModel, Field

class Coordinates(BaseModel):
    lat: float
    lon: float

class ResolvedAddress(BaseModel):
    label: str
    city: str | None = None
    postcode: str | None = None
    city_code: str
    coordinates: Coordinates

class Unit(BaseModel):
    id: str
    date: str | None
    price: float = Field(gt=0)
    surface: float = Field(gt=9)
    price_m2: int
    rooms: int = 0
    type: Literal["Maison", "Appartement"]
    floor: int | None = None
    confidence: Literal["high", "low"]

class SalesSummary(BaseModel):
    count: int
    avg_price: int
    avg_price_m2: int
    min_price: int
    max_price: int
    min_price_m2: int
    max_price_m2: int
    avg_surface: int

class UnitsResponse(BaseModel):
    address: ResolvedAddress
    section: str | None = None
    units: list[Unit]
    summary: SalesSummary

class AddressSuggestion(BaseModel):
    label: str
    lat: float
    lon: float
    score: float
    house_number: str | None = None
    street: str | None = None
    postcode: str | None = None
    city: str | None = None
    city_code: str | None = None

class AddressSearchResponse(BaseModel):
    query: str
    results: list[AddressSuggestion]
    cached: bool = False

class DpeResponse(BaseModel):
    found: bool
    results: list = []
    geo_score: float | None = None
    energy_class: str | None = None
    ghg_class: str | None = None
    energy_consumption: int | None = None
    ghg_emission: int | None = None
    construction_year: int | None = None
    surface: int | None = None
    building_type: str | None = None
    established_on: str | None = None
    dpe_number: str | None = None
    dpe_address: str | None = None
