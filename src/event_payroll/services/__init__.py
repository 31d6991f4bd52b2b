"""Event payroll services."""

from event_payroll.services.data_source import (
    AdjustmentPersistenceError,
    InMemoryPayrollDataSource,
    PaymentPersistenceError,
    PayrollDataSource,
    PayrollPersistenceError,
)
from event_payroll.services.payment_aggregator import PaymentAggregator
from event_payroll.services.sql_source import SqlPayrollDataSource

__all__ = [
    "AdjustmentPersistenceError",
    "InMemoryPayrollDataSource",
    "PaymentAggregator",
    "PaymentPersistenceError",
    "PayrollDataSource",
    "PayrollPersistenceError",
    "SqlPayrollDataSource",
]
