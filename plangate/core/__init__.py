"""Cross-cutting infrastructure: configuration, logging, events, protocols, DI."""
