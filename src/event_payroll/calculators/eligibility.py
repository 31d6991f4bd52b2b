"""Commission and tip eligibility by division."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from decimal import Decimal

from event_payroll.calculators.types import ZERO, Division, Eligibility, TeamMember


class EligibilityClassifier:
    """Classifies team members by division.

    - vendor, both: commission and tips
    - trailers: base extended pay only, excluded from headcount and hours pool
    - anything else (including empty): treated as vendor so nobody is
      silently excluded from pay
    """

    @staticmethod
    def classify(division: Division | str | None) -> Eligibility:
        resolved = Division.parse(division)
        is_trailers = resolved == Division.TRAILERS
        return Eligibility(is_vendor_eligible=not is_trailers, is_trailers=is_trailers)

    @staticmethod
    def eligible_vendor_count(
        members: Iterable[TeamMember], hours_by_vendor: Mapping[str, Decimal]
    ) -> int:
        """Count of non-trailers members with worked hours.

        Falls back to the full roster size when nobody qualifies.
        """
        members = list(members)
        count = sum(
            1
            for m in members
            if EligibilityClassifier.classify(m.division).is_vendor_eligible
            and hours_by_vendor.get(m.vendor_id, ZERO) > 0
        )
        return count if count > 0 else len(members)

    @staticmethod
    def total_eligible_hours(
        members: Iterable[TeamMember], hours_by_vendor: Mapping[str, Decimal]
    ) -> Decimal:
        """Hours pool for tip proration (trailers excluded)."""
        total = ZERO
        for m in members:
            if EligibilityClassifier.classify(m.division).is_trailers:
                continue
            total += hours_by_vendor.get(m.vendor_id, ZERO)
        return total
