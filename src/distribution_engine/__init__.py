"""Project distribution engine: payroll proration across project allocations."""

__version__ = "1.0.0"
