"""FastAPI endpoints for the Identity context."""

from fastapi import APIRouter, Depends, File, Request, Response, UploadFile

from storefront.catalogue.api.schemas import ProductOut
from storefront.dependencies import (
    admin_actor,
    current_actor,
    get_app_settings,
    get_storage_port,
    get_store,
    read_upload,
)
from storefront.identity.api.schemas import (
    AddAddressRequest,
    AddressOut,
    AdminUpdateUserRequest,
    AuthResponse,
    AuthUser,
    LoginRequest,
    RegisterRequest,
    UpdateAddressRequest,
    UpdateProfileRequest,
    UserOut,
)
from storefront.identity.user.account import (
    AccountHandler,
    LoginUser,
    RegisterUser,
    Session,
    SetProfileImage,
    UpdateProfile,
    UpdateUser,
)
from storefront.identity.user.addresses import AddAddress, AddressBookHandler, UpdateAddress
from storefront.shared.auth import Actor, Role
from storefront.shared.config import Settings
from storefront.shared.db import Store
from storefront.shared.schemas import Envelope, ListEnvelope, PageEnvelope, StatusResponse
from storefront.storage.port import StoragePort

user_router = APIRouter(prefix="/users", tags=["users"])

TOKEN_COOKIE = "token"


def _token_response(response: Response, session: Session, settings: Settings) -> AuthResponse:
    response.set_cookie(
        TOKEN_COOKIE,
        session.token,
        max_age=settings.cookie_expire_days * 24 * 60 * 60,
        httponly=True,
        secure=settings.is_production,
    )
    user = session.user
    return AuthResponse(
        token=session.token,
        user=AuthUser(id=user.id, name=user.name, email=user.email, role=user.role.value),
    )


# --- Auth endpoints ---


@user_router.post("/register", status_code=201, response_model=AuthResponse)
def register(
    body: RegisterRequest,
    response: Response,
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> AuthResponse:
    command = RegisterUser(name=body.name, email=body.email, password=body.password)
    session = AccountHandler(store, settings).register(command)
    return _token_response(response, session, settings)


@user_router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    response: Response,
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> AuthResponse:
    session = AccountHandler(store, settings).login(LoginUser(email=body.email, password=body.password))
    return _token_response(response, session, settings)


@user_router.get("/logout", response_model=StatusResponse)
def logout(response: Response) -> StatusResponse:
    response.delete_cookie(TOKEN_COOKIE)
    return StatusResponse(message="User logged out successfully")


# --- Profile endpoints ---


@user_router.get("/me", response_model=Envelope[UserOut])
@user_router.get("/profile", response_model=Envelope[UserOut])
def me(
    actor: Actor = Depends(current_actor),
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> Envelope:
    return Envelope(data=UserOut.from_user(AccountHandler(store, settings).me(actor)))


@user_router.put("/profile", response_model=Envelope[UserOut])
def update_profile(
    body: UpdateProfileRequest,
    actor: Actor = Depends(current_actor),
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> Envelope:
    command = UpdateProfile(changes=body.model_dump(exclude_unset=True))
    user = AccountHandler(store, settings).update_profile(actor, command)
    return Envelope(data=UserOut.from_user(user))


@user_router.put("/profile/image", response_model=Envelope[UserOut])
def set_profile_image(
    profile_image: UploadFile = File(...),
    actor: Actor = Depends(current_actor),
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
    storage: StoragePort = Depends(get_storage_port),
) -> Envelope:
    command = SetProfileImage(file=read_upload(profile_image))
    user = AccountHandler(store, settings, storage).set_profile_image(actor, command)
    return Envelope(data=UserOut.from_user(user))


# --- Address book endpoints ---


@user_router.get("/addresses", response_model=ListEnvelope[AddressOut])
def list_addresses(actor: Actor = Depends(current_actor), store: Store = Depends(get_store)) -> ListEnvelope:
    return ListEnvelope.of(AddressBookHandler(store).list_addresses(actor), AddressOut)


@user_router.post("/addresses", status_code=201, response_model=ListEnvelope[AddressOut])
def add_address(
    body: AddAddressRequest,
    actor: Actor = Depends(current_actor),
    store: Store = Depends(get_store),
) -> ListEnvelope:
    addresses = AddressBookHandler(store).add_address(actor, AddAddress(**body.model_dump()))
    return ListEnvelope.of(addresses, AddressOut)


@user_router.put("/addresses/{address_id}", response_model=ListEnvelope[AddressOut])
def update_address(
    address_id: str,
    body: UpdateAddressRequest,
    actor: Actor = Depends(current_actor),
    store: Store = Depends(get_store),
) -> ListEnvelope:
    command = UpdateAddress(address_id=address_id, changes=body.model_dump(exclude_unset=True))
    return ListEnvelope.of(AddressBookHandler(store).update_address(actor, command), AddressOut)


@user_router.delete("/addresses/{address_id}", response_model=ListEnvelope[AddressOut])
def delete_address(
    address_id: str,
    actor: Actor = Depends(current_actor),
    store: Store = Depends(get_store),
) -> ListEnvelope:
    return ListEnvelope.of(AddressBookHandler(store).remove_address(actor, address_id), AddressOut)


@user_router.put("/addresses/{address_id}/default", response_model=ListEnvelope[AddressOut])
def set_default_address(
    address_id: str,
    actor: Actor = Depends(current_actor),
    store: Store = Depends(get_store),
) -> ListEnvelope:
    return ListEnvelope.of(AddressBookHandler(store).set_default_address(actor, address_id), AddressOut)


# --- Wishlist endpoints ---


@user_router.get("/wishlist", response_model=ListEnvelope[ProductOut])
def wishlist(actor: Actor = Depends(current_actor), store: Store = Depends(get_store)) -> ListEnvelope:
    return ListEnvelope.of(AddressBookHandler(store).wishlist(actor), ProductOut)


@user_router.post("/wishlist/{product_id}", response_model=ListEnvelope[ProductOut])
def add_to_wishlist(
    product_id: str,
    actor: Actor = Depends(current_actor),
    store: Store = Depends(get_store),
) -> ListEnvelope:
    return ListEnvelope.of(AddressBookHandler(store).add_to_wishlist(actor, product_id), ProductOut)


@user_router.delete("/wishlist/{product_id}", response_model=ListEnvelope[ProductOut])
def remove_from_wishlist(
    product_id: str,
    actor: Actor = Depends(current_actor),
    store: Store = Depends(get_store),
) -> ListEnvelope:
    return ListEnvelope.of(AddressBookHandler(store).remove_from_wishlist(actor, product_id), ProductOut)


# --- Admin endpoints ---


@user_router.get("", response_model=PageEnvelope[UserOut])
def list_users(
    request: Request,
    actor: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> PageEnvelope:
    page = AccountHandler(store, settings).list_users(actor, request.query_params)
    data = [UserOut.from_user(user) for user in page.items]
    return PageEnvelope(count=len(data), total=page.total, pagination=page.pagination, data=data)


@user_router.get("/{user_id}", response_model=Envelope[UserOut])
def get_user(
    user_id: str,
    actor: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> Envelope:
    return Envelope(data=UserOut.from_user(AccountHandler(store, settings).get_user(actor, user_id)))


@user_router.put("/{user_id}", response_model=Envelope[UserOut])
def update_user(
    user_id: str,
    body: AdminUpdateUserRequest,
    actor: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> Envelope:
    changes = body.model_dump(exclude_unset=True)
    if "role" in changes:
        changes["role"] = Role(changes["role"])
    user = AccountHandler(store, settings).update_user(actor, UpdateUser(user_id=user_id, changes=changes))
    return Envelope(data=UserOut.from_user(user))


@user_router.delete("/{user_id}", response_model=StatusResponse)
def delete_user(
    user_id: str,
    actor: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
    storage: StoragePort = Depends(get_storage_port),
) -> StatusResponse:
    AccountHandler(store, settings, storage).delete_user(actor, user_id)
    return StatusResponse(message="User deleted successfully")
