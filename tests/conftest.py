"""Canonical test fixtures used across engine, data and API tests.

Fixture: four tracts.
  36061019500  Manhattan, watched, 500 Korean of 5000 (10%), rent $2,500
  36061000100  Manhattan, 100 Korean of 4000 (2.5%), rent $1,800
  36061000200  Manhattan, no Korean residents, rent $6,000
  36047000300  Brooklyn, 50 Korean of 1000 (5%), rent unknown
Incident and pedestrian trend rows exist for the first two tracts only.
"""

import pytest

from src.data import records
from src.data.snapshot import SnapshotZoneSource

WATCHED = "36061019500"
MIDTOWN = "36061000100"
UPTOWN = "36061000200"
BROOKLYN = "36047000300"


def _zone(geoid, foot, crime, flood, rent_score, poi, avg_rent, resilience=5.0):
    return {
        "GEOID": geoid,
        "resilience_score": resilience,
        "foot_traffic_score": foot,
        "crime_score": crime,
        "flood_risk_score": flood,
        "rent_score": rent_score,
        "poi_score": poi,
        "avg_rent": avg_rent,
    }


@pytest.fixture
def zone_records() -> list[dict]:
    return [
        _zone(WATCHED, 8.0, 6.0, 5.0, 4.0, 3.0, 2500),
        _zone(MIDTOWN, 5.0, 5.0, 5.0, 5.0, 5.0, 1800),
        _zone(UPTOWN, 9.0, 9.0, 9.0, 9.0, 9.0, 6000),
        _zone(BROOKLYN, 4.0, "7.5", None, 2.0, 1.0, None),
    ]


@pytest.fixture
def ethnicity_records() -> list[dict]:
    return [
        {"GEOID": WATCHED, "total_population": 5000, "A": 1200, "AEA": 800, "ASA": 300, "AEAKrn": 500},
        {"GEOID": MIDTOWN, "total_population": 4000, "A": 450, "AEA": 300, "ASA": 200, "AEAKrn": 100},
        {"GEOID": UPTOWN, "total_population": 2000, "A": 0, "AEA": 0, "ASA": 0, "AEAKrn": 0},
        {"GEOID": BROOKLYN, "total_population": 1000, "A": 80, "AEA": 60, "ASA": 20, "AEAKrn": 50},
    ]


def _demographics(geoid, total, label, male, female, under_20, twenties, rest):
    return {
        "GEOID": geoid,
        "Total population": total,
        "NTA2020_1": label,
        "Male (%)": male,
        "Female (%)": female,
        "15 to 19 years (%)": under_20,
        "20 to 24 years (%)": twenties[0],
        "25 to 29 years (%)": twenties[1],
        "30 to 34 years (%)": rest,
    }


@pytest.fixture
def demographic_records() -> list[dict]:
    return [
        _demographics(WATCHED, 5000, "Koreatown", 48, 52, 5, (10, 15), 20),
        _demographics(MIDTOWN, 4000, "Midtown", 50, 50, 5, (8, 12), 18),
        _demographics(UPTOWN, 2000, "Harlem", 45, 55, 8, (6, 9), 15),
        _demographics(BROOKLYN, 1000, None, 51, 49, 6, (7, 8), 14),
    ]


@pytest.fixture
def income_records() -> list[dict]:
    return [
        {"GEOID": WATCHED, "HHI50t74E": 200, "HHI75t99E": 150, "HI100t149E": 400, "HHIU10E": 250},
        {"GEOID": MIDTOWN, "HHI50t74E": 100, "HHI75t99E": 100, "HI100t149E": 100, "HHIU10E": 100},
        {"GEOID": UPTOWN, "HHIU10E": 500},
        {"GEOID": BROOKLYN},
    ]


@pytest.fixture
def crime_trend_records() -> list[dict]:
    return [
        {
            "GEOID": WATCHED,
            "year_2020": 5.0, "year_2021": 5.5, "year_2022": 6.0, "year_2023": 6.0, "year_2024": 6.5,
            "pred_2025": 6.0, "pred_2026": 7.0, "pred_2027": 8.0,
        },
        {"GEOID": MIDTOWN, "year_2022": 4.0, "year_2023": 4.0, "year_2024": 5.0},
    ]


@pytest.fixture
def foot_traffic_trend_records() -> list[dict]:
    row = {"GEOID": WATCHED}
    for year, base in (("2023", 6.0), ("2024", 7.0), ("pred_2025", 7.5), ("pred_2026", 8.0), ("pred_2027", 8.5)):
        row[f"morning_{year}"] = base - 1
        row[f"afternoon_{year}"] = base
        row[f"evening_{year}"] = base + 1
        row[f"morning_afternoon_{year}"] = base - 0.5
        row[f"morning_evening_{year}"] = base
        row[f"afternoon_evening_{year}"] = base + 0.5
        row[f"average_{year}"] = base
    return [row, {"GEOID": MIDTOWN, "morning_2024": 3.0, "evening_2024": 5.0}]


@pytest.fixture
def snapshot_tables(
    zone_records,
    ethnicity_records,
    demographic_records,
    income_records,
    crime_trend_records,
    foot_traffic_trend_records,
) -> dict[str, list[dict] | None]:
    return {
        "zones": zone_records,
        "ethnicity": ethnicity_records,
        "demographics": demographic_records,
        "income": income_records,
        "crime_trends": crime_trend_records,
        "foot_traffic_trends": foot_traffic_trend_records,
    }


@pytest.fixture
def snapshot_source(snapshot_tables) -> SnapshotZoneSource:
    return SnapshotZoneSource(snapshot_tables)


@pytest.fixture
def zones(zone_records):
    return records.zone_rows(zone_records)


@pytest.fixture
def ethnicity_rows(ethnicity_records):
    return records.ethnicity_rows(ethnicity_records)


@pytest.fixture
def demographic_rows(demographic_records):
    return records.demographic_rows(demographic_records)


@pytest.fixture
def income_rows(income_records):
    return records.income_rows(income_records)


@pytest.fixture
def crime_rows(crime_trend_records):
    return records.trend_rows(crime_trend_records)


@pytest.fixture
def foot_traffic_rows(foot_traffic_trend_records):
    return records.trend_rows(foot_traffic_trend_records)


@pytest.fixture
def demographic_only_weights() -> tuple[tuple[str, float], ...]:
    """All weight on the composition factor."""
    return (
        ("foot_traffic", 0),
        ("demographic", 100),
        ("crime", 0),
        ("flood_risk", 0),
        ("rent_score", 0),
        ("poi", 0),
    )
