"""Payroll and revenue calculation engine."""

from event_payroll.calculators.commission import CommissionPayCalculator
from event_payroll.calculators.eligibility import EligibilityClassifier
from event_payroll.calculators.revenue_split import RevenueSplitCalculator
from event_payroll.calculators.rounding import TieredRounding
from event_payroll.calculators.shift_aggregator import ShiftAggregator
from event_payroll.calculators.state_rates import StateRateTable

__all__ = [
    "CommissionPayCalculator",
    "EligibilityClassifier",
    "RevenueSplitCalculator",
    "ShiftAggregator",
    "StateRateTable",
    "TieredRounding",
]
