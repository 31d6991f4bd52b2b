"""State wage rules: base hourly rate and state-specific pay rules."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from decimal import Decimal

from event_payroll.calculators.types import PayrollPolicy, StateRule

logger = logging.getLogger(__name__)

DEFAULT_BASE_RATES: dict[str, Decimal] = {
    "CA": Decimal("17.28"),
    "NY": Decimal("17.00"),
    "AZ": Decimal("14.70"),
    "WI": Decimal("15.00"),
}

NO_REST_BREAK_STATES = frozenset({"NV", "WI", "AZ", "NY"})
FLAT_COMMISSION_STATES = frozenset({"AZ", "NY"})


def normalize_state(state_code: str | None) -> str:
    return (state_code or "").strip().upper()


class StateRateTable:
    """Resolves wage rules per two-letter state code.

    Rate selection priority:
    1. Configured rate (state_rate table or explicit mapping), if positive
    2. Built-in default for the state
    3. The policy's fallback base rate

    Unknown states never raise: payroll for the whole event would
    otherwise be blocked by one bad state code.
    """

    def __init__(
        self,
        configured_rates: Mapping[str, Decimal] | None = None,
        policy: PayrollPolicy | None = None,
    ):
        self.policy = policy or PayrollPolicy()
        self._configured: dict[str, Decimal] = {}
        for code, rate in (configured_rates or {}).items():
            normalized = normalize_state(code)
            rate = Decimal(str(rate))
            if normalized and rate > 0:
                self._configured[normalized] = rate

    def resolve_state(self, state_code: str | None) -> str:
        """Normalize a state code, defaulting blank codes to the policy state."""
        return normalize_state(state_code) or normalize_state(self.policy.default_state)

    def is_known(self, state_code: str | None) -> bool:
        code = self.resolve_state(state_code)
        return code in self._configured or code in DEFAULT_BASE_RATES

    def base_rate(self, state_code: str | None) -> Decimal:
        code = self.resolve_state(state_code)
        if code in self._configured:
            return self._configured[code]
        if code in DEFAULT_BASE_RATES:
            return DEFAULT_BASE_RATES[code]
        logger.warning(
            "No base rate configured for state %r, using fallback %s",
            code,
            self.policy.fallback_base_rate,
        )
        return self.policy.fallback_base_rate

    def rest_break_applies(self, state_code: str | None) -> bool:
        return self.resolve_state(state_code) not in NO_REST_BREAK_STATES

    def uses_flat_commission_formula(self, state_code: str | None) -> bool:
        return self.resolve_state(state_code) in FLAT_COMMISSION_STATES

    def rules_for(self, state_code: str | None) -> StateRule:
        """Resolve all rules for a state in one value."""
        code = self.resolve_state(state_code)
        return StateRule(
            state_code=code,
            base_rate=self.base_rate(code),
            rest_break_applies=self.rest_break_applies(code),
            uses_flat_commission_formula=self.uses_flat_commission_formula(code),
            is_known=self.is_known(code),
        )
