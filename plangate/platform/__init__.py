"""Platform integrations (workflow engine)."""
