"""Leave module."""
