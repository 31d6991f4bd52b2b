"""Pydantic schemas for API request/response models."""

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from event_payroll.calculators.types import Division, PayrollSource, WarningCode


# ============================================================================
# Payroll schemas
# ============================================================================


class VendorPaymentResponse(BaseModel):
    """Computed pay for one vendor."""

    model_config = ConfigDict(from_attributes=True)

    vendor_id: str
    division: Division
    actual_hours: Decimal
    display_hours: Decimal
    regular_pay: Decimal
    commission_amount: Decimal
    total_final_commission: Decimal
    tips: Decimal
    rest_break: Decimal
    adjustment: Decimal
    reimbursement: Decimal
    adjustment_amount: Decimal
    total_gross_pay: Decimal
    adjustment_note: str | None = None


class RevenueSplitResponse(BaseModel):
    """Event-level revenue split."""

    model_config = ConfigDict(from_attributes=True)

    gross_collected: Decimal
    tips_removed: Decimal
    total_sales: Decimal
    tax_amount: Decimal
    net_sales: Decimal
    artist_share: Decimal
    venue_share: Decimal
    operator_share: Decimal
    commission_pool: Decimal
    split_percent_total: Decimal


class PayrollWarningResponse(BaseModel):
    """Non-fatal data-quality warning."""

    model_config = ConfigDict(from_attributes=True)

    code: WarningCode
    message: str
    vendor_id: str | None = None


class EventPayrollResponse(BaseModel):
    """Payroll for one event."""

    model_config = ConfigDict(from_attributes=True)

    event_id: str
    source: PayrollSource
    base_rate: Decimal | None = None
    total_gross_pay: Decimal
    vendor_payments: list[VendorPaymentResponse]
    revenue_split: RevenueSplitResponse
    warnings: list[PayrollWarningResponse]


class BatchPayrollResponse(BaseModel):
    """Payroll for several events keyed by event ID."""

    results: dict[str, EventPayrollResponse]


# ============================================================================
# Adjustment schemas
# ============================================================================


class AdjustmentRequest(BaseModel):
    """Schema for saving a manual adjustment."""

    adjustment_amount: Decimal = Decimal("0")
    reimbursement_amount: Decimal = Decimal("0")
    note: str | None = Field(default=None, max_length=1000)
    created_by: str | None = None


class AdjustmentResponse(BaseModel):
    """Schema for a saved adjustment."""

    event_id: str
    vendor_id: str
    adjustment_amount: Decimal
    reimbursement_amount: Decimal
    net_amount: Decimal
    note: str | None = None


# ============================================================================
# Save schemas
# ============================================================================


class SavePayrollRequest(BaseModel):
    """Schema for saving computed payroll."""

    created_by: str | None = None


class SavePayrollResponse(BaseModel):
    """Schema for saved payroll response."""

    event_id: str
    vendor_count: int
    total_gross_pay: Decimal
    saved_at: datetime
    payroll: EventPayrollResponse


# ============================================================================
# Error schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Schema for error response."""

    detail: str
    code: str | None = None
    context: dict[str, Any] | None = None
