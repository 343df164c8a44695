"""HTTP surface: enforcement dependency, exception handlers and internal routes."""
