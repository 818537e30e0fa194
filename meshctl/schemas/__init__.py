"""Pydantic request/response schemas."""

from meshctl.schemas.auth import LoginRequest, TokenResponse
from meshctl.schemas.error import ErrorResponse
from meshctl.schemas.gateway import ExtClientView, UserRemoteGateway
from meshctl.schemas.health import HealthResponse
from meshctl.schemas.legacy import LegacyNode, parse_legacy_bool
from meshctl.schemas.migration import (
    HostPull,
    HostView,
    LegacyNodeCredentials,
    MigrationRequest,
    NodeView,
    ServerConfig,
)
from meshctl.schemas.user import SuperAdminCreate, UserCreate, UserResponse, UserUpdate

__all__ = [
    "ErrorResponse",
    "ExtClientView",
    "HealthResponse",
    "HostPull",
    "HostView",
    "LegacyNode",
    "LegacyNodeCredentials",
    "LoginRequest",
    "MigrationRequest",
    "NodeView",
    "ServerConfig",
    "SuperAdminCreate",
    "TokenResponse",
    "UserCreate",
    "UserRemoteGateway",
    "UserResponse",
    "UserUpdate",
    "parse_legacy_bool",
]
