"""Scan pipeline engines."""
