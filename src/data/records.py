"""Conversion of raw table records into engine row types."""

from collections.abc import Iterable, Mapping
from typing import Any

from src.data.catalog import DEMOGRAPHICS_LABEL_KEY, DEMOGRAPHICS_TOTAL_KEY, ETHNICITY_TOTAL_KEY
from src.models.zone import CompositionRow, TrendRow, ZoneRow

Record = Mapping[str, Any]


def zone_rows(records: Iterable[Record]) -> list[ZoneRow]:
    return [ZoneRow.from_record(r) for r in records]


def ethnicity_rows(records: Iterable[Record]) -> list[CompositionRow]:
    return [CompositionRow.from_record(r, total_key=ETHNICITY_TOTAL_KEY) for r in records]


def demographic_rows(records: Iterable[Record]) -> list[CompositionRow]:
    return [
        CompositionRow.from_record(
            r, total_key=DEMOGRAPHICS_TOTAL_KEY, label_key=DEMOGRAPHICS_LABEL_KEY
        )
        for r in records
    ]


def income_rows(records: Iterable[Record]) -> list[CompositionRow]:
    # Income uses the sum of its brackets as denominator, not a stored total
    return [CompositionRow.from_record(r) for r in records]


def trend_rows(records: Iterable[Record]) -> list[TrendRow]:
    return [TrendRow.from_record(r) for r in records]
