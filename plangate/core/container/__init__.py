"""Dependency Injection Container Module.

Usage:
------
    # Initialize at startup (call once from main.py or the worker)
    from plangate.core.container import initialize_container
    from plangate.core.config import settings
    initialize_container(settings)

    # Import the module-level container after initialization
    from plangate.core import container as container_mod
    gate = container_mod.container.limit_gate

    # In tests (construct directly with fakes, don't use global)
    from plangate.core.container import Container
    test_container = Container(event_bus=FakeEventBus(), ...)

Module structure:
-----------------
    container/
    ├── __init__.py      # This file - exports public API
    ├── container.py     # Container dataclass (serves)
    └── factory.py       # create_container() (builds)
"""

from typing import TYPE_CHECKING

from plangate.core.container.container import Container
from plangate.core.container.factory import create_container

if TYPE_CHECKING:
    from plangate.core.config import Settings

__all__ = [
    "Container",
    "container",
    "create_container",
    "initialize_container",
    "reset_container",
    "set_container",
]


# ---------------------------------------------------------------------------
# Global container instance
# ---------------------------------------------------------------------------

container: Container | None = None
"""Global container instance.

Initialized via `initialize_container()` at application startup.

Import and use this in:
- api/deps.py: For FastAPI dependency functions
- platform/temporal/worker/wiring.py: For Temporal activity construction

Do NOT import this in domain code. Domains receive dependencies
via constructor parameters, never by importing the container directly.
"""


def initialize_container(settings: "Settings") -> None:
    """Initialize the global container. Call once at startup.

    Args:
        settings: Application settings from core/config

    Raises:
        RuntimeError: If called more than once (container already initialized)
    """
    global container

    if container is not None:
        raise RuntimeError(
            "Container already initialized. "
            "initialize_container() should only be called once at startup."
        )

    container = create_container(settings)


def set_container(value: Container) -> None:
    """Install a pre-built container (tests and embedding applications)."""
    global container
    container = value


def reset_container() -> None:
    """Reset the global container to None. For testing only.

    WARNING: Do not use in production code.
    """
    global container
    container = None
