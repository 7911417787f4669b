"""Shared service helpers (money arithmetic)."""
