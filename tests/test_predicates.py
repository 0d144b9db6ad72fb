"""Tests for the parcels predicate builder."""

from parcels.models import FilterSpec
from parcels.predicates import AUTHORIZED_COUNTY, build_parcel_query


class TestAuthorization:

    def test_unauthenticated_gets_county_restriction_first(self, parcels_config):
        built = build_parcel_query(FilterSpec(), parcels_config.interactive_limits)
        assert built.conditions == ("LOWER(county) = $1",)
        assert built.values == (AUTHORIZED_COUNTY,)
        assert built.limit_placeholder == "$2"
        assert built.params == ("dallas", 50)

    def test_authenticated_without_filters_has_no_conditions(self, parcels_config):
        built = build_parcel_query(FilterSpec(isAuthenticated="true"), parcels_config.interactive_limits)
        assert built.conditions == ()
        assert built.has_conditions is False
        assert built.where_sql == ""
        assert built.limit_position == 1
        assert built.params == (50,)


class TestOrdering:

    def test_all_filters_in_fixed_order(self, parcels_config):
        spec = FilterSpec.from_query_params({
            "maxSqft": "3000",
            "minSqft": "1000",
            "maxPrice": "500000",
            "minPrice": "100000",
        })
        built = build_parcel_query(spec, parcels_config.interactive_limits)

        assert built.conditions == (
            "LOWER(county) = $1",
            "total_value >= $2",
            "total_value <= $3",
            "sqft IS NOT NULL AND sqft >= $4",
            "sqft IS NOT NULL AND sqft <= $5",
        )
        assert built.values == ("dallas", 100000, 500000, 1000.0, 3000.0)
        assert built.limit_placeholder == "$6"

    def test_placeholders_follow_values_when_filters_skipped(self, parcels_config):
        spec = FilterSpec.from_query_params({"isAuthenticated": "true", "maxPrice": "10", "maxSqft": "20"})
        built = build_parcel_query(spec, parcels_config.interactive_limits)

        assert built.where_sql == "total_value <= $1 AND sqft IS NOT NULL AND sqft <= $2"
        assert built.params == (10, 20.0, 50)

    def test_each_placeholder_matches_its_position(self, parcels_config):
        spec = FilterSpec.from_query_params({"minPrice": "1", "maxPrice": "2", "minSqft": "3", "maxSqft": "4"})
        built = build_parcel_query(spec, parcels_config.interactive_limits)

        for i, fragment in enumerate(built.conditions, start=1):
            assert fragment.endswith(f"${i}")
        assert len(built.params) == len(built.conditions) + 1


class TestValues:

    def test_price_is_floored_sqft_is_not(self, parcels_config):
        spec = FilterSpec.from_query_params({"minPrice": "100.9", "minSqft": "100.9"})
        built = build_parcel_query(spec, parcels_config.interactive_limits)

        assert built.values[1] == 100
        assert isinstance(built.values[1], int)
        assert built.values[2] == 100.9

    def test_malformed_filters_are_ignored(self, parcels_config):
        spec = FilterSpec.from_query_params({"minPrice": "abc", "maxPrice": "inf", "minSqft": "-1"})
        built = build_parcel_query(spec, parcels_config.interactive_limits)

        assert built.conditions == ("LOWER(county) = $1",)


class TestLimit:

    def test_interactive_ceiling(self, parcels_config):
        built = build_parcel_query(FilterSpec(limit="10000"), parcels_config.interactive_limits)
        assert built.limit_value == 200

    def test_export_ceiling(self, parcels_config):
        built = build_parcel_query(FilterSpec(limit="10000"), parcels_config.export_limits)
        assert built.limit_value == 5000

    def test_export_default(self, parcels_config):
        built = build_parcel_query(FilterSpec(), parcels_config.export_limits)
        assert built.limit_value == 5000

    def test_requested_limit_kept(self, parcels_config):
        built = build_parcel_query(FilterSpec(limit="25"), parcels_config.interactive_limits)
        assert built.params[-1] == 25

    def test_zero_limit_falls_back_to_default(self, parcels_config):
        built = build_parcel_query(FilterSpec(limit="0"), parcels_config.interactive_limits)
        assert built.limit_value == 50
