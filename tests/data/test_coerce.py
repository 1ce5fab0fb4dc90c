"""Tests for raw record coercion into engine rows."""

from decimal import Decimal

from src.data import records
from src.data.coerce import to_optional_number
from src.models.zone import CompositionRow, ZoneRow


class TestCoercion:
    def test_numbers(self):
        assert to_optional_number(3) == 3.0
        assert to_optional_number(2.5) == 2.5
        assert to_optional_number(Decimal("7.25")) == 7.25

    def test_numeric_strings(self):
        assert to_optional_number(" 42.5 ") == 42.5
        assert to_optional_number("n/a") is None
        assert to_optional_number("") is None

    def test_non_finite_and_other_types(self):
        assert to_optional_number(float("nan")) is None
        assert to_optional_number(float("inf")) is None
        assert to_optional_number(True) is None
        assert to_optional_number([1]) is None
        assert to_optional_number(None) is None


class TestRecords:
    def test_zone_row(self):
        row = ZoneRow.from_record({"GEOID": 36061019500, "crime_score": "6.5", "avg_rent": None})
        assert row.geoid == "36061019500"
        assert row.crime_score == 6.5
        assert row.avg_rent is None
        assert row.poi_score is None

    def test_composition_row_keeps_blank_columns(self):
        row = CompositionRow.from_record({"GEOID": "1", "A": "", "AEA": 30, "total_population": 100},
                                         total_key="total_population")
        assert row.total == 100
        assert not row.has("A")
        assert "A" in row.values
        assert row.number("A") == 0
        assert row.number("AEA") == 30

    def test_demographic_label_not_a_value(self, demographic_records):
        rows = records.demographic_rows(demographic_records)
        assert rows[0].label == "Koreatown"
        assert rows[0].total == 5000
        assert "NTA2020_1" not in rows[0].values
        assert rows[3].label is None

    def test_income_rows_have_no_total(self, income_records):
        assert all(r.total is None for r in records.income_rows(income_records))
