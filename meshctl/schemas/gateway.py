"""Schemas for remote-access gateway bindings and the per-user gateway view."""

from pydantic import BaseModel, Field


class ExtClientView(BaseModel):
    """Remote-access client profile bound to an ingress gateway."""

    client_id: str
    network: str
    owner_id: str
    ingress_gateway_id: str
    remote_access_client_id: str
    enabled: bool = True

    class Config:
        from_attributes = True


class UserRemoteGateway(BaseModel):
    """One authorized gateway of a user; connected when a matching client is already bound to it."""

    gw_id: str = Field(..., description="Ingress gateway Node id")
    gw_name: str = Field(..., description="Name of the Host running the gateway")
    network: str
    gw_client: ExtClientView | None = Field(
        default=None, description="Client bound to this gateway for the requested remote access client id"
    )
    connected: bool = False
