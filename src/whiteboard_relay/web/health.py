"""Health check endpoints for whiteboard-relay.

Provides /health and /ready endpoints for container orchestration
and load balancer health checks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any, ClassVar

from litestar import Controller, Request, get

from whiteboard_relay import __version__
from whiteboard_relay.services.relay import RelayService


class HealthStatus(str, Enum):
    """Health check status values."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


@dataclass
class ComponentHealth:
    """Health status of an individual component."""

    name: str
    status: HealthStatus
    message: str | None = None
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class HealthResponse:
    """Health check response."""

    status: HealthStatus
    version: str = __version__
    timestamp: str = field(default_factory=lambda: datetime.now(UTC).isoformat())
    components: list[ComponentHealth] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "status": self.status.value,
            "version": self.version,
            "timestamp": self.timestamp,
            "components": [
                {
                    "name": c.name,
                    "status": c.status.value,
                    "message": c.message,
                    "details": c.details,
                }
                for c in self.components
            ],
        }


def overall_status(components: list[ComponentHealth]) -> HealthStatus:
    """The worst status among ``components``."""
    statuses = {c.status for c in components}
    if HealthStatus.UNHEALTHY in statuses:
        return HealthStatus.UNHEALTHY
    if HealthStatus.DEGRADED in statuses:
        return HealthStatus.DEGRADED
    return HealthStatus.HEALTHY


def check_relay(service: RelayService | None) -> ComponentHealth:
    """Report relay state as a health component."""
    if service is None:
        return ComponentHealth(
            name="relay",
            status=HealthStatus.UNHEALTHY,
            message="No relay service installed",
        )
    stats = service.stats()
    return ComponentHealth(
        name="relay",
        status=HealthStatus.HEALTHY,
        message="Relay is accepting connections",
        details={"connections": stats.connections, "rooms": stats.rooms},
    )


def _relay_service(request: Request) -> RelayService | None:
    service = getattr(request.app.state, "relay_service", None)
    return service if isinstance(service, RelayService) else None


class HealthController(Controller):
    """Health check controller.

    Provides endpoints for liveness and readiness probes used by
    container orchestration systems like Kubernetes.
    """

    path = ""
    include_in_schema: ClassVar[bool] = True
    tags: ClassVar[list[str]] = ["Health"]

    @get("/health")
    async def health(self, request: Request) -> dict[str, Any]:
        """Liveness probe endpoint.

        Returns the overall health status of the application together with
        live connection and room counts.
        """
        components = [
            ComponentHealth(name="application", status=HealthStatus.HEALTHY, message="Application is running"),
            check_relay(_relay_service(request)),
        ]
        return HealthResponse(status=overall_status(components), components=components).to_dict()

    @get("/ready")
    async def ready(self, request: Request) -> dict[str, Any]:
        """Readiness probe endpoint.

        The relay keeps all state in memory, so it is ready as soon as a relay
        service is registered on the app state.
        """
        checks = {"application": True, "relay": _relay_service(request) is not None}
        return {
            "ready": all(checks.values()),
            "timestamp": datetime.now(UTC).isoformat(),
            "checks": checks,
        }
