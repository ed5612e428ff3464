from __future__ import annotations

from ipmatcher.api.routes.health import router as health_router
from ipmatcher.api.routes.networks import router as networks_router

ALL_ROUTERS = [
    health_router,
    networks_router,
]
