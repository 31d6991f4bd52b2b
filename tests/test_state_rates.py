"""Tests for state wage rules."""

from decimal import Decimal

from event_payroll.calculators.state_rates import StateRateTable
from event_payroll.calculators.types import PayrollPolicy


class TestBaseRate:
    """Test base rate lookup order."""

    def test_built_in_defaults(self):
        table = StateRateTable()
        assert table.base_rate("CA") == Decimal("17.28")
        assert table.base_rate("NY") == Decimal("17.00")
        assert table.base_rate("AZ") == Decimal("14.70")
        assert table.base_rate("WI") == Decimal("15.00")

    def test_codes_are_normalized(self):
        table = StateRateTable()
        assert table.base_rate(" az ") == Decimal("14.70")

    def test_configured_rate_wins_over_default(self):
        table = StateRateTable({"ca": Decimal("18.50")})
        assert table.base_rate("CA") == Decimal("18.50")

    def test_non_positive_configured_rate_is_ignored(self):
        table = StateRateTable({"CA": Decimal("0")})
        assert table.base_rate("CA") == Decimal("17.28")

    def test_unknown_state_falls_back(self):
        """Unknown states never raise; they get the fallback rate."""
        table = StateRateTable()
        assert table.base_rate("TX") == Decimal("17.28")
        assert table.is_known("TX") is False

    def test_fallback_rate_comes_from_policy(self):
        table = StateRateTable(policy=PayrollPolicy(fallback_base_rate=Decimal("16.00")))
        assert table.base_rate("TX") == Decimal("16.00")

    def test_blank_state_uses_default_state(self):
        table = StateRateTable(policy=PayrollPolicy(default_state="NY"))
        assert table.resolve_state("  ") == "NY"
        assert table.base_rate(None) == Decimal("17.00")


class TestStateRules:
    """Test rest-break and flat-commission rules."""

    def test_rest_break_exempt_states(self):
        table = StateRateTable()
        for code in ("NV", "WI", "AZ", "NY"):
            assert table.rest_break_applies(code) is False
        assert table.rest_break_applies("CA") is True
        assert table.rest_break_applies("TX") is True

    def test_flat_commission_states(self):
        table = StateRateTable()
        assert table.uses_flat_commission_formula("AZ") is True
        assert table.uses_flat_commission_formula("ny") is True
        assert table.uses_flat_commission_formula("CA") is False
        assert table.uses_flat_commission_formula("WI") is False

    def test_rules_for_bundles_answers(self):
        rule = StateRateTable({"AZ": Decimal("15.10")}).rules_for("az")
        assert rule.state_code == "AZ"
        assert rule.base_rate == Decimal("15.10")
        assert rule.rest_break_applies is False
        assert rule.uses_flat_commission_formula is True
        assert rule.is_known is True
