"""Merge orchestration."""
