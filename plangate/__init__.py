"""plangate: per-tenant usage metering and plan-limit enforcement."""
