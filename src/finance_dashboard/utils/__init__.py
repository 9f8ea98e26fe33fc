"""Shared helpers for dates, cells and logging."""
