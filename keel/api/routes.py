"""
API routes for Keel
Introspection endpoints served next to the dispatched application
"""
from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field
from typing import List

from ..core.config import Config
from ..core.container import ServiceContainer

router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    env: str


class ServiceInfo(BaseModel):
    """A single container registration"""
    name: str = Field(..., description="Service name")
    lifetime: str = Field(..., description="'shared' or 'transient'")
    resolved: bool = Field(..., description="True if a shared instance has been built")


class ServicesResponse(BaseModel):
    services: List[ServiceInfo] = Field(default_factory=list)


def get_container(request: Request) -> ServiceContainer:
    """Get ServiceContainer from app state (injected by FastAPI)"""
    return request.app.state.container


@router.get("/health", response_model=HealthResponse)
async def health():
    """Health check endpoint"""
    return HealthResponse(status="healthy", env=Config.ENV)


@router.get("/_services", response_model=ServicesResponse)
async def list_services(container: ServiceContainer = Depends(get_container)):
    """List the registered services"""
    services = []
    for name in container.names():
        entry = container.entry(name)
        services.append(ServiceInfo(name=name, lifetime=entry.lifetime.value, resolved=entry.resolved))
    return ServicesResponse(services=services)
