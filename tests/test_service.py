"""Tests for ParcelsService orchestration (repository faked)."""

import psycopg
import pytest

from parcels.models import FilterSpec
from parcels.service import ParcelsService

from conftest import FakeParcelsRepository


class TestListParcels:

    def test_rows_located_and_stripped(self, parcels_config, parcel_rows):
        repo = FakeParcelsRepository(rows=parcel_rows)
        service = ParcelsService(config=parcels_config, repository=repo)

        parcels = service.list_parcels(FilterSpec())

        assert [p["sl_uuid"] for p in parcels] == ["a-1", "a-2", "a-3"]
        assert parcels[0]["latitude"] == pytest.approx(32.78)
        assert parcels[1]["longitude"] == pytest.approx(-96.5)
        assert "latitude" not in parcels[2]
        assert all("geom" not in p for p in parcels)

    def test_interactive_limit_and_geometry_selected(self, parcels_config):
        repo = FakeParcelsRepository()
        service = ParcelsService(config=parcels_config, repository=repo)

        service.list_parcels(FilterSpec(limit="10000"))

        built, include_geometry = repo.calls[0]
        assert built.limit_value == 200
        assert include_geometry is True

    def test_store_failure_propagates(self, parcels_config):
        repo = FakeParcelsRepository(error=psycopg.OperationalError("timeout"))
        service = ParcelsService(config=parcels_config, repository=repo)

        with pytest.raises(psycopg.OperationalError):
            service.list_parcels(FilterSpec())


class TestExportParcelsCsv:

    def test_csv_without_geometry(self, parcels_config, parcel_rows):
        rows = [{k: v for k, v in r.items() if k != "geom"} for r in parcel_rows]
        repo = FakeParcelsRepository(rows=rows)
        service = ParcelsService(config=parcels_config, repository=repo)

        text = service.export_parcels_csv(FilterSpec())

        assert text.startswith("sl_uuid,address,county,sqft,total_value\n")
        assert text.count("\n") == 4

        built, include_geometry = repo.calls[0]
        assert include_geometry is False
        assert built.limit_value == 5000

    def test_export_ceiling(self, parcels_config):
        repo = FakeParcelsRepository()
        service = ParcelsService(config=parcels_config, repository=repo)

        service.export_parcels_csv(FilterSpec(limit="10000", isAuthenticated="true"))

        built, _ = repo.calls[0]
        assert built.limit_value == 5000
        assert built.conditions == ()
