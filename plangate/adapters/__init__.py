"""Protocol implementations (cache, event bus, metrics, payment, audit)."""
