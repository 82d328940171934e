"""FastAPI dependencies: the store, settings, storage and the request's Actor.

The actor is resolved once per request from a Bearer token or the ``token``
cookie. Public routes use ``optional_actor`` (a bad or missing token means an
anonymous caller); protected routes use ``current_actor`` or ``admin_actor``.
"""

from fastapi import Depends, Request, UploadFile
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from storefront.identity.user.user import UserRepository
from storefront.shared.auth import Actor, decode_token
from storefront.shared.config import Settings
from storefront.shared.db import Store
from storefront.shared.exceptions import Unauthorized, ValidationError
from storefront.shared.logging import bind_actor
from storefront.storage import get_storage
from storefront.storage.port import StoragePort, UploadedFile

bearer_scheme = HTTPBearer(auto_error=False)


def get_store(request: Request) -> Store:
    return request.app.state.store


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_storage_port() -> StoragePort:
    return get_storage()


def _read_token(request: Request, credentials: HTTPAuthorizationCredentials | None) -> str | None:
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get("token") or None


def _resolve(token: str, store: Store, settings: Settings) -> Actor:
    claims = decode_token(settings, token)
    user = UserRepository(store).get_or_none(claims.get("sub", ""))
    if user is None:
        raise Unauthorized("User belonging to this token no longer exists")
    bind_actor(user.id, user.role.value)
    return Actor(user_id=user.id, role=user.role, name=user.name, email=user.email)


def optional_actor(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> Actor:
    token = _read_token(request, credentials)
    if token is None:
        return Actor.anonymous()
    try:
        return _resolve(token, store, settings)
    except Unauthorized:
        return Actor.anonymous()


def current_actor(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> Actor:
    token = _read_token(request, credentials)
    if token is None:
        raise Unauthorized("Not authorized to access this route")
    return _resolve(token, store, settings)


def admin_actor(actor: Actor = Depends(current_actor)) -> Actor:
    return actor.require_admin()


def read_upload(upload: UploadFile, allowed_prefix: str | tuple[str, ...] = "image/") -> UploadedFile:
    """Read a multipart file into memory, rejecting unexpected content types."""
    content_type = upload.content_type or "application/octet-stream"
    if not content_type.startswith(allowed_prefix):
        raise ValidationError({upload.filename or "file": [f"Unsupported file type '{content_type}'"]})
    return UploadedFile(data=upload.file.read(), content_type=content_type, filename=upload.filename or "upload")
