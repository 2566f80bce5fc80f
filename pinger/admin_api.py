"""Admin API for the pinger.

Provides endpoints to list, add and remove ping destinations by hand.
Mount :func:`create_router` on an existing app, or build a standalone one::

    app = create_app(service)
"""

from __future__ import annotations

from fastapi import APIRouter, FastAPI
from pydantic import BaseModel

from pinger import __version__
from pinger.destination import DEFAULT_METHOD, Destination
from pinger.service import PingService


class DestinationModel(BaseModel):
    tenant_id: str
    environment_id: str
    resource_id: str
    url: str
    method: str = DEFAULT_METHOD

    def to_destination(self) -> Destination:
        return Destination(
            tenant_id=self.tenant_id,
            environment_id=self.environment_id,
            resource_id=self.resource_id,
            url=self.url,
            method=self.method,
        )

    @classmethod
    def from_destination(cls, d: Destination) -> DestinationModel:
        return cls(**d.to_dict())


def create_router(service: PingService) -> APIRouter:
    router = APIRouter(prefix="/destinations", tags=["destinations"])

    @router.get("", response_model=list[DestinationModel])
    async def list_destinations():
        return [DestinationModel.from_destination(d) for d in service.list_destinations()]

    @router.post("", status_code=201, response_model=DestinationModel)
    async def add_destination(req: DestinationModel):
        service.add_destination(req.to_destination())
        return req

    @router.delete("/{resource_id}")
    async def remove_destination(resource_id: str):
        service.remove_destination(resource_id)
        return {"ok": True}

    return router


def create_app(service: PingService) -> FastAPI:
    app = FastAPI(title="Pinger", version=__version__)
    app.include_router(create_router(service))

    @app.get("/health")
    async def health():
        return {
            "status": "ok",
            "destinations": len(service.registry),
            "scheduler_running": service.scheduler.running,
            "last_tick": service.scheduler.last_tick,
        }

    return app
