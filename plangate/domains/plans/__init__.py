"""Plans domain: plan-limit resolution and plan maintenance."""
