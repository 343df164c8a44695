"""Temporal integration: reconciliation workflows, activities, schedules and worker."""
