"""Event payroll API endpoints."""

from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, HTTPException, Path, Query, status

from event_payroll.api.dependencies import Aggregator
from event_payroll.api.schemas import (
    AdjustmentRequest,
    AdjustmentResponse,
    BatchPayrollResponse,
    ErrorResponse,
    EventPayrollResponse,
    SavePayrollRequest,
    SavePayrollResponse,
)
from event_payroll.calculators.types import EventPayrollResult, WarningCode

router = APIRouter(tags=["payroll"])


def _raise_if_missing(result: EventPayrollResult) -> None:
    if any(w.code == WarningCode.MISSING_EVENT for w in result.warnings):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Event {result.event_id} not found",
        )


# ============================================================================
# Payroll computation
# ============================================================================


@router.get(
    "/events/{event_id}/payroll",
    response_model=EventPayrollResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_event_payroll(
    aggregator: Aggregator,
    event_id: Annotated[str, Path()],
    statuses: Annotated[list[str] | None, Query(alias="status")] = None,
) -> EventPayrollResponse:
    """Compute per-vendor pay and the revenue split for one event."""
    result = await aggregator.compute_event_payroll(event_id, statuses=statuses)
    _raise_if_missing(result)
    return EventPayrollResponse.model_validate(result)


@router.get(
    "/payroll",
    response_model=BatchPayrollResponse,
    responses={400: {"model": ErrorResponse}},
)
async def get_payroll_batch(
    aggregator: Aggregator,
    event_ids: Annotated[str, Query(description="Comma-separated event IDs")],
    statuses: Annotated[list[str] | None, Query(alias="status")] = None,
) -> BatchPayrollResponse:
    """Compute payroll for several events; failures are isolated per event."""
    ids = [e.strip() for e in event_ids.split(",") if e.strip()]
    if not ids:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="event_ids must contain at least one event ID",
        )

    results = await aggregator.compute_event_payroll_batch(ids, statuses=statuses)
    return BatchPayrollResponse(
        results={
            event_id: EventPayrollResponse.model_validate(result)
            for event_id, result in results.items()
        }
    )


# ============================================================================
# Adjustments
# ============================================================================


@router.put(
    "/events/{event_id}/adjustments/{vendor_id}",
    response_model=AdjustmentResponse,
    responses={500: {"model": ErrorResponse}},
)
async def put_adjustment(
    aggregator: Aggregator,
    payload: AdjustmentRequest,
    event_id: Annotated[str, Path()],
    vendor_id: Annotated[str, Path()],
) -> AdjustmentResponse:
    """Create or replace the manual adjustment for one vendor on an event."""
    saved = await aggregator.save_adjustment(
        event_id,
        vendor_id,
        adjustment_amount=payload.adjustment_amount,
        reimbursement_amount=payload.reimbursement_amount,
        note=payload.note,
        created_by=payload.created_by,
    )
    return AdjustmentResponse(
        event_id=event_id,
        vendor_id=saved.vendor_id,
        adjustment_amount=saved.adjustment_amount,
        reimbursement_amount=saved.reimbursement_amount,
        net_amount=saved.net_amount,
        note=saved.note,
    )


# ============================================================================
# Save computed payroll
# ============================================================================


@router.post(
    "/events/{event_id}/payroll/save",
    response_model=SavePayrollResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def save_event_payroll(
    aggregator: Aggregator,
    event_id: Annotated[str, Path()],
    payload: SavePayrollRequest | None = None,
) -> SavePayrollResponse:
    """Recompute an event's payroll and save it as the event's payments."""
    result = await aggregator.compute_event_payroll(event_id)
    _raise_if_missing(result)

    await aggregator.persist_event_payroll(
        result, created_by=payload.created_by if payload else None
    )

    return SavePayrollResponse(
        event_id=event_id,
        vendor_count=len(result.vendor_payments),
        total_gross_pay=result.total_gross_pay,
        saved_at=datetime.now(timezone.utc),
        payroll=EventPayrollResponse.model_validate(result),
    )
