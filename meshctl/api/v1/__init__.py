"""API v1 routes."""

from fastapi import APIRouter

from meshctl.api.v1 import gateways, health, nodes, users

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(gateways.router, prefix="/users", tags=["remote-access"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(nodes.router, prefix="/nodes", tags=["nodes"])
