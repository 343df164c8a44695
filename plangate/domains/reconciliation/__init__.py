"""Reconciliation domain: scheduled jobs that persist and roll over live usage."""
