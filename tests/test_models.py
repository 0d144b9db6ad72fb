"""Tests for FilterSpec, LimitPolicy and ParcelsConfig."""

import pytest
from pydantic import ValidationError

from parcels.config import ParcelsConfig
from parcels.models import FilterSpec, LimitPolicy, ResolvedPoint


class TestFilterSpec:

    def test_defaults(self):
        spec = FilterSpec()
        assert spec.authenticated is False
        assert spec.min_price is None
        assert spec.max_sqft is None
        assert spec.limit is None

    def test_from_query_params(self):
        spec = FilterSpec.from_query_params({
            "isAuthenticated": "true",
            "minPrice": "100.9",
            "maxPrice": "",
            "minSqft": "abc",
            "maxSqft": "2500",
            "limit": "25",
            "unrelated": "ignored",
        })
        assert spec.authenticated is True
        assert spec.min_price == pytest.approx(100.9)
        assert spec.max_price is None
        assert spec.min_sqft is None
        assert spec.max_sqft == 2500.0
        assert spec.limit == 25

    def test_field_names_accepted(self):
        spec = FilterSpec(authenticated=True, min_price=5, limit=3)
        assert spec.authenticated is True
        assert spec.min_price == 5.0
        assert spec.limit == 3

    def test_non_finite_and_negative_bounds_dropped(self):
        spec = FilterSpec.from_query_params({"minPrice": "inf", "maxPrice": "-1", "minSqft": "NaN"})
        assert spec.min_price is None
        assert spec.max_price is None
        assert spec.min_sqft is None

    def test_frozen(self):
        spec = FilterSpec()
        with pytest.raises(ValidationError):
            spec.limit = 10


class TestLimitPolicy:

    def test_default_when_absent(self, parcels_config):
        assert parcels_config.interactive_limits.apply(None) == 50
        assert parcels_config.export_limits.apply(None) == 5000

    def test_ceiling(self, parcels_config):
        assert parcels_config.interactive_limits.apply(10000) == 200
        assert parcels_config.export_limits.apply(10000) == 5000

    def test_requested_below_ceiling(self, parcels_config):
        assert parcels_config.interactive_limits.apply(25) == 25

    def test_custom_policy(self):
        assert LimitPolicy(default=5, ceiling=10).apply(7) == 7


class TestParcelsConfig:

    def test_env_defaults(self, monkeypatch):
        for name in ("PARCELS_SCHEMA", "PARCELS_TABLE", "PARCELS_DEFAULT_LIMIT", "PARCELS_MAX_LIMIT"):
            monkeypatch.delenv(name, raising=False)
        config = ParcelsConfig()
        assert config.parcels_schema == "takehome"
        assert config.parcels_table == "dallas_parcels"
        assert config.interactive_limits == LimitPolicy(50, 200)
        assert config.export_limits == LimitPolicy(5000, 5000)

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("PARCELS_MAX_LIMIT", "500")
        monkeypatch.setenv("PARCELS_TABLE", "parcels_2026")
        config = ParcelsConfig()
        assert config.max_limit == 500
        assert config.parcels_table == "parcels_2026"

    def test_default_above_ceiling_rejected(self):
        with pytest.raises(ValidationError):
            ParcelsConfig(default_limit=300, max_limit=200)


def test_resolved_point_to_dict():
    assert ResolvedPoint(latitude=32.78, longitude=-96.8).to_dict() == {
        "latitude": 32.78,
        "longitude": -96.8,
    }
