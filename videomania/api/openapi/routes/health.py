"""Health check endpoints."""

from enum import Enum

from fastapi import APIRouter
from pydantic import BaseModel, Field

from videomania.api.dependencies import FactoryDep, SettingsDep
from videomania.infrastructure.factory import InfrastructureFactory

router = APIRouter()


class HealthState(str, Enum):
    """Health check status."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class ComponentHealth(BaseModel):
    """Health status of a single component."""

    name: str = Field(description="Component name")
    status: HealthState = Field(description="Component health status")
    latency_ms: float | None = Field(default=None, description="Probe latency")
    message: str | None = Field(default=None, description="Additional details")


class HealthResponse(BaseModel):
    """Health check response."""

    status: HealthState = Field(description="Overall health status")
    version: str = Field(description="Application version")
    environment: str = Field(description="Deployment environment")
    components: list[ComponentHealth] = Field(
        default_factory=list,
        description="Individual component health",
    )


class LivenessResponse(BaseModel):
    """Simple liveness response."""

    status: str = Field(default="ok")


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    ready: bool = Field(description="Whether the service is ready to accept requests")
    checks: dict[str, bool] = Field(
        default_factory=dict,
        description="Individual readiness checks",
    )


async def _probe_components(factory: InfrastructureFactory) -> list[ComponentHealth]:
    components: list[ComponentHealth] = []
    probes = {
        "blob_storage": factory.get_blob_storage,
        "document_db": factory.get_document_db,
    }
    for name, get_provider in probes.items():
        try:
            result = await get_provider().health_check()
        except Exception as e:
            components.append(
                ComponentHealth(
                    name=name, status=HealthState.UNHEALTHY, message=str(e)
                )
            )
            continue
        components.append(
            ComponentHealth(
                name=name,
                status=HealthState.HEALTHY if result.healthy else HealthState.UNHEALTHY,
                latency_ms=round(result.latency_ms, 2),
                message=result.message,
            )
        )
    return components


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Get overall health status of the service and its components.",
)
async def health_check(
    settings: SettingsDep,
    factory: FactoryDep,
) -> HealthResponse:
    """Check health of the blob store and the document store."""
    components = await _probe_components(factory)

    unhealthy = sum(1 for c in components if c.status == HealthState.UNHEALTHY)
    if unhealthy == 0:
        overall = HealthState.HEALTHY
    elif unhealthy < len(components):
        overall = HealthState.DEGRADED
    else:
        overall = HealthState.UNHEALTHY

    return HealthResponse(
        status=overall,
        version=settings.app.version,
        environment=settings.app.environment,
        components=components,
    )


@router.get(
    "/health/live",
    response_model=LivenessResponse,
    summary="Liveness probe",
    description="Simple liveness check for Kubernetes probes.",
)
async def liveness() -> LivenessResponse:
    """Simple liveness check - just verifies the app is running."""
    return LivenessResponse(status="ok")


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    description="Readiness check for Kubernetes probes.",
)
async def readiness(
    factory: FactoryDep,
) -> ReadinessResponse:
    """Ready when every storage dependency answers its health check."""
    components = await _probe_components(factory)
    checks = {c.name: c.status == HealthState.HEALTHY for c in components}
    return ReadinessResponse(ready=all(checks.values()), checks=checks)
