"""HR Ops — attendance, leave, payroll and user management API."""

__version__ = "1.0.0"
