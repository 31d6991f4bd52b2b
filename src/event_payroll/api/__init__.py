"""HTTP API for event payroll."""
