"""Common dependencies that can be used across the API."""

from typing import Awaitable, Callable, Optional, get_type_hints
from uuid import UUID

from fastapi import Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from plangate.core import container as container_mod
from plangate.core.container import Container
from plangate.db.session import get_db
from plangate.domains.usage.protocols import LimitEnforcementGateProtocol
from plangate.domains.usage.types import LimitRequirement

__all__ = ["Inject", "get_container", "get_db", "get_tenant_id", "require_limit"]


def get_container() -> Container:
    """Get the DI container. Initialized at startup."""
    c = container_mod.container
    if c is None:
        raise RuntimeError("Container not initialized. Call initialize_container() first.")
    return c


# ---------------------------------------------------------------------------
# Protocol Injection
# ---------------------------------------------------------------------------

# Cache of protocol_type → Container field name, built once at first call.
_INJECT_CACHE: dict[type, str] = {}


def _resolve_field_name(protocol_type: type) -> str:
    """Find which Container field matches the given protocol type."""
    if not _INJECT_CACHE:
        for name, hint in get_type_hints(Container).items():
            _INJECT_CACHE.setdefault(hint, name)

    field_name = _INJECT_CACHE.get(protocol_type)
    if field_name is None:
        available = list(_INJECT_CACHE.values())
        raise TypeError(
            f"No binding for {protocol_type.__name__} in Container. Available fields: {available}"
        )
    return field_name


def Inject(protocol_type: type):  # noqa: N802 - uppercase to match FastAPI convention
    """Resolve a protocol implementation from the DI container.

    Usage in FastAPI endpoints::

        @router.post("/")
        async def create(gate: LimitEnforcementGateProtocol = Inject(LimitEnforcementGateProtocol)):
            ...
    """
    field_name = _resolve_field_name(protocol_type)

    def _resolve(c: Container = Depends(get_container)):
        return getattr(c, field_name)

    return Depends(_resolve)


# ---------------------------------------------------------------------------
# Tenant + enforcement
# ---------------------------------------------------------------------------


async def get_tenant_id(x_tenant_id: Optional[str] = Header(None)) -> UUID:
    """Tenant id from the ``X-Tenant-ID`` header set by the authenticating gateway."""
    if not x_tenant_id:
        raise HTTPException(status_code=400, detail="X-Tenant-ID header is required")
    try:
        return UUID(x_tenant_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail="X-Tenant-ID must be a UUID") from e


def require_limit(requirement: LimitRequirement) -> Callable[..., Awaitable[None]]:
    """Dependency factory: reject the request when *requirement* does not fit the plan.

    Usage::

        CREATE_PROJECT = LimitRequirement(metric="projects")

        @router.post("/projects", dependencies=[Depends(require_limit(CREATE_PROJECT))])
        async def create_project(...):
            ...

    Raises LimitExceededError (rendered as 402 by ``limit_exceeded_exception_handler``).
    """
    options = requirement.options()

    async def _enforce(
        tenant_id: UUID = Depends(get_tenant_id),
        db: AsyncSession = Depends(get_db),
        gate: LimitEnforcementGateProtocol = Inject(LimitEnforcementGateProtocol),
    ) -> None:
        await gate.enforce(db, tenant_id, requirement.metric, requirement.amount, options)

    return _enforce
