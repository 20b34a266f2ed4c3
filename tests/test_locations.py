"""Tests for location name resolution."""

import pytest

from gl_ledger.locations import format_location_name, resolve_location


class TestFormatLocationName:
    def test_converts_uppercase_to_title_case(self):
        assert format_location_name("LATCHFORD HOUSE") == "Latchford House"

    def test_handles_mixed_case(self):
        assert format_location_name("downtown STREET") == "Downtown Street"

    def test_normalizes_multiple_spaces(self):
        assert format_location_name("  DOWNTOWN   STREET ") == "Downtown Street"

    @pytest.mark.parametrize("empty", ["", None, "   "])
    def test_returns_general_for_empty_input(self, empty):
        assert format_location_name(empty) == "General"


class TestResolveLocation:
    def test_colon_hint(self):
        assert resolve_location("SECURITY:LATCHFORD HOUSE") == "Latchford House"

    def test_colon_hint_after_date_range(self):
        assert resolve_location("01/15-01/16 TENTS:BUCKLEY GYM") == "Buckley Gym"

    def test_colon_hint_stops_at_column_gap(self):
        assert resolve_location("FIRE:OLD MILL   EXTRA") == "Old Mill"

    def test_strips_date_range_and_category_keyword(self):
        assert resolve_location("01/20-01/21 SECURITY WAREHOUSE 9") == "Warehouse 9"

    def test_takes_text_before_column_gap(self):
        assert resolve_location("DRIVING PACIFIC COAST HWY    NIGHT") == "Pacific Coast Hwy"

    def test_keyword_only_description_is_general(self):
        assert resolve_location("01/05-01/06 SECURITY") == "General"

    def test_plain_text_without_noise_is_general_when_too_short(self):
        assert resolve_location("AB") == "General"

    @pytest.mark.parametrize("empty", ["", None, "   "])
    def test_blank_description_is_general(self, empty):
        assert resolve_location(empty) == "General"

    def test_never_returns_empty(self):
        for desc in ["::", "01/05-01/06", "POLICE:", "FIRE: "]:
            assert resolve_location(desc)
