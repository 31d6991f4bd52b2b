"""Event payroll: vendor pay and revenue split for ticketed events."""

__version__ = "1.0.0"
