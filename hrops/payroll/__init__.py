"""Payroll module."""
