"""Tenants domain (read-only view consumed by reconciliation)."""
