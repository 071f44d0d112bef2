"""Ingest boundary: raw Etalab rows to typed records, and helpers."""

from __future__ import annotations

from datetime import date

import pytest

from dvf_units.core.utils import normalize_street, parse_date, parse_float, parse_int
from dvf_units.data.base import RawMutationRecord


ETALAB_ROW = {
    "id_mutation": "2022-123456",
    "date_mutation": "2022-09-30",
    "nature_mutation": "Vente",
    "valeur_fonciere": "312000.0",
    "surface_reelle_bati": "61.0",
    "nombre_pieces_principales": "3.0",
    "code_type_local": "2",
    "type_local": "Appartement",
    "adresse_numero": "36.0",
    "adresse_suffixe": "B",
    "adresse_nom_voie": "RUE AUGUSTE BLANQUI",
}


def test_from_api_types_every_field():
    rec = RawMutationRecord.from_api(ETALAB_ROW)

    assert rec.mutation_id == "2022-123456"
    assert rec.mutation_date == date(2022, 9, 30)
    assert rec.nature == "Vente"
    assert rec.declared_value == 312000.0
    assert rec.built_surface_m2 == 61.0
    assert rec.main_rooms == 3
    assert rec.property_type_code == 2
    assert rec.house_number == 36.0
    assert rec.address_suffix == "B"
    assert rec.street_name == "RUE AUGUSTE BLANQUI"


def test_from_api_tolerates_nulls_and_junk():
    rec = RawMutationRecord.from_api({
        "id_mutation": "x",
        "date_mutation": None,
        "nature_mutation": None,
        "valeur_fonciere": "",
        "surface_reelle_bati": "n/a",
        "nombre_pieces_principales": None,
        "code_type_local": None,
        "adresse_numero": None,
        "adresse_suffixe": "  ",
        "adresse_nom_voie": None,
    })

    assert rec.mutation_id == "x"
    assert rec.mutation_date is None
    assert rec.nature == ""
    assert rec.declared_value is None
    assert rec.built_surface_m2 is None
    assert rec.main_rooms is None
    assert rec.property_type_code is None
    assert rec.house_number is None
    assert rec.address_suffix is None
    assert rec.street_name is None


def test_from_api_accepts_native_numbers():
    rec = RawMutationRecord.from_api({
        "id_mutation": "y", "valeur_fonciere": 150000, "surface_reelle_bati": 42,
        "code_type_local": 1, "adresse_numero": 7,
    })
    assert rec.declared_value == 150000.0
    assert rec.property_type_code == 1
    assert rec.house_number == 7.0


@pytest.mark.parametrize("raw,expected", [
    ("36.0", 36.0), ("36", 36.0), (" 12.5 ", 12.5), (80, 80.0),
    (None, None), ("", None), ("abc", None), ("nan", None), ("inf", None), (True, None),
])
def test_parse_float(raw, expected):
    assert parse_float(raw) == expected


@pytest.mark.parametrize("raw,expected", [
    ("2", 2), (2, 2), (2.0, 2), ("2.0", 2), ("2.5", None), (None, None), ("x", None), (False, None),
])
def test_parse_int(raw, expected):
    assert parse_int(raw) == expected


@pytest.mark.parametrize("raw,expected", [
    ("2023-06-15", date(2023, 6, 15)),
    ("2023-06-15T00:00:00", date(2023, 6, 15)),
    ("15/06/2023", None),
    ("2023-13-01", None),
    (None, None),
])
def test_parse_date(raw, expected):
    assert parse_date(raw) == expected


@pytest.mark.parametrize("raw,expected", [
    ("Rue Auguste Blanqui", "rueaugusteblanqui"),
    ("RUE AUGUSTE-BLANQUI", "rueaugusteblanqui"),
    ("Rue de l'Église", "ruedelglise"),
    ("Av. du 8 Mai 1945", "avdu8mai1945"),
    (None, ""),
])
def test_normalize_street(raw, expected):
    assert normalize_street(raw) == expected
