"""Tests for CSV escaping and rendering."""

from decimal import Decimal

import pytest

from parcels.csv_export import CSV_COLUMNS, escape_csv_value, render_csv_line, render_parcels_csv


class TestEscapeCsvValue:

    @pytest.mark.parametrize("value,expected", [
        (None, ""),
        ("", ""),
        ("plain", "plain"),
        (1200, "1200"),
        (Decimal("250000.50"), "250000.50"),
        ("a,b", '"a,b"'),
        ('say "hi"', '"say ""hi"""'),
        ("line1\nline2", '"line1\nline2"'),
        ("cr\rhere", '"cr\rhere"'),
    ])
    def test_escaping(self, value, expected):
        assert escape_csv_value(value) == expected


def test_line_uses_fixed_column_order():
    row = {"total_value": 5, "county": "dallas", "extra": "ignored", "sl_uuid": "u1"}
    assert render_csv_line(row) == "u1,,dallas,,5"


class TestRenderParcelsCsv:

    def test_header_only(self):
        assert render_parcels_csv([]) == "sl_uuid,address,county,sqft,total_value\n"

    def test_rows(self, parcel_rows):
        text = render_parcels_csv(parcel_rows)
        lines = text.split("\n")

        assert lines[0] == ",".join(CSV_COLUMNS)
        assert lines[1] == "a-1,100 Main St,dallas,1200,250000"
        assert lines[2] == 'a-2,"Suite 5, 200 Elm St",dallas,,99000'
        assert text.endswith("\n")

    def test_geometry_never_rendered(self, parcel_rows):
        assert "geom" not in render_parcels_csv(parcel_rows)
