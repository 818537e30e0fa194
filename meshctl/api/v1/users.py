"""User endpoints: authentication, super-admin bootstrap and transfer, and account CRUD."""

from typing import Annotated

from fastapi import APIRouter, Depends

from meshctl.api.v1.auth import get_current_user, get_store, require_admin, require_self_or_admin
from meshctl.core.config import get_settings
from meshctl.models.user import User
from meshctl.schemas.auth import LoginRequest, TokenResponse
from meshctl.schemas.user import SuperAdminCreate, UserCreate, UserResponse, UserUpdate
from meshctl.services import superadmin, users
from meshctl.services.store import RecordStore

router = APIRouter()


@router.post("/adm/authenticate", response_model=TokenResponse)
def authenticate_user(
    body: LoginRequest,
    store: Annotated[RecordStore, Depends(get_store)],
) -> TokenResponse:
    """
    Authenticate with username and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <access_token>
    """
    token = users.authenticate(store, body.username, body.password, get_settings())
    return TokenResponse(access_token=token, token_type="bearer", username=body.username)


@router.get("/adm/hassuperadmin", response_model=bool)
def has_superadmin(store: Annotated[RecordStore, Depends(get_store)]) -> bool:
    """Whether the first super-admin has been created."""
    return superadmin.has_superadmin(store)


@router.post("/adm/createsuperadmin", response_model=UserResponse)
def create_superadmin(
    body: SuperAdminCreate,
    store: Annotated[RecordStore, Depends(get_store)],
) -> User:
    """Create the first super-admin. Unauthenticated; only works while none exists."""
    return superadmin.create_superadmin(store, body, get_settings())


@router.post("/adm/transfersuperadmin/{username}", response_model=UserResponse)
def transfer_superadmin(
    username: str,
    caller: Annotated[User, Depends(require_admin)],
    store: Annotated[RecordStore, Depends(get_store)],
) -> User:
    """Hand the super-admin role to the admin {username}; the caller becomes an admin."""
    return superadmin.transfer_superadmin(store, caller, username, get_settings())


@router.get("", response_model=list[UserResponse])
def list_users(
    _admin: Annotated[User, Depends(require_admin)],
    store: Annotated[RecordStore, Depends(get_store)],
) -> list[User]:
    return store.list_users()


@router.get("/{username}", response_model=UserResponse)
def get_user(
    username: str,
    _caller: Annotated[User, Depends(require_self_or_admin)],
    store: Annotated[RecordStore, Depends(get_store)],
) -> User:
    return store.get_user(username)


@router.post("/{username}", response_model=UserResponse)
def create_user(
    username: str,
    body: UserCreate,
    caller: Annotated[User, Depends(require_admin)],
    store: Annotated[RecordStore, Depends(get_store)],
) -> User:
    return users.create_user(store, caller, username, body)


@router.put("/{username}", response_model=UserResponse)
def update_user(
    username: str,
    body: UserUpdate,
    caller: Annotated[User, Depends(get_current_user)],
    store: Annotated[RecordStore, Depends(get_store)],
) -> User:
    """Update password or admin flag; the permission rules decide who may change what."""
    return users.update_user(store, caller, username, body)


@router.delete("/{username}", response_model=str)
def delete_user(
    username: str,
    caller: Annotated[User, Depends(require_admin)],
    store: Annotated[RecordStore, Depends(get_store)],
) -> str:
    users.delete_user(store, caller, username)
    return f"{username} deleted."
