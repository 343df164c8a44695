"""Billing domain: subscription state and idempotent provider-webhook processing."""
