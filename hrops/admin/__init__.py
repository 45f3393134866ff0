"""Admin module."""
