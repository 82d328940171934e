"""Registration, login, profile and admin user management."""

from dataclasses import dataclass
from typing import Any

from storefront.identity.user.user import User, UserRepository
from storefront.shared.auth import Actor, Role, issue_token
from storefront.shared.config import Settings
from storefront.shared.db import Store
from storefront.shared.domain import Command
from storefront.shared.exceptions import Conflict, MissingField, Unauthorized
from storefront.shared.listing import ListingPage, paginate, parse_listing
from storefront.shared.logging import get_logger
from storefront.storage.port import StoragePort, UploadedFile

logger = get_logger(__name__)

PROFILE_FOLDER = "profiles"

FILTERABLE = {"name": str, "email": str, "role": str}


class RegisterUser(Command):
    name: str
    email: str
    password: str


class LoginUser(Command):
    email: str
    password: str


class UpdateProfile(Command):
    changes: dict[str, Any]


class SetProfileImage(Command):
    file: UploadedFile


class UpdateUser(Command):
    user_id: str
    changes: dict[str, Any]


@dataclass
class Session:
    """An authenticated user and the access token issued for them."""

    user: User
    token: str


class AccountHandler:
    def __init__(self, store: Store, settings: Settings, storage: StoragePort | None = None) -> None:
        self.users = UserRepository(store)
        self.settings = settings
        self.storage = storage

    def _session(self, user: User) -> Session:
        return Session(user=user, token=issue_token(self.settings, user.id, user.role.value))

    def _check_email_free(self, email: str, user_id: str | None = None) -> None:
        filters = {"email": email.strip().lower()}
        if user_id is not None:
            filters["_id"] = {"$ne": user_id}
        if self.users.exists(filters):
            raise Conflict("User with this email already exists")

    def register(self, command: RegisterUser, role: Role = Role.USER) -> Session:
        self._check_email_free(command.email)
        user = User.register(
            name=command.name,
            email=command.email,
            password=command.password,
            role=role,
            rounds=self.settings.password_hash_rounds,
        )
        self.users.add(user)
        logger.info("User registered", user_id=user.id, role=user.role.value)
        return self._session(user)

    def login(self, command: LoginUser) -> Session:
        if not command.email or not command.password:
            raise MissingField("Please provide an email and password")

        user = self.users.get_by_email(command.email)
        if user is None or not user.check_password(command.password):
            logger.warning("Login failed", email=command.email)
            raise Unauthorized("Invalid credentials")
        return self._session(user)

    def me(self, actor: Actor) -> User:
        actor.require_authenticated()
        return self.users.get(actor.user_id)

    def update_profile(self, actor: Actor, command: UpdateProfile) -> User:
        user = self.me(actor)
        if "email" in command.changes:
            self._check_email_free(command.changes["email"], user.id)
        user.update_profile(**command.changes)
        self.users.add(user)
        return user

    def set_profile_image(self, actor: Actor, command: SetProfileImage) -> User:
        user = self.me(actor)
        f = command.file
        url = self.storage.upload(f.data, f.content_type, PROFILE_FOLDER, f.filename)
        previous = user.replace_profile_image(url)
        self.users.add(user)
        if previous:
            self.storage.delete(previous)
        return user

    # -------------------------------------------------------------------
    # Admin
    # -------------------------------------------------------------------
    def list_users(self, actor: Actor, params) -> ListingPage:
        actor.require_admin()
        return paginate(self.users, parse_listing(params, FILTERABLE))

    def get_user(self, actor: Actor, user_id: str) -> User:
        actor.require_admin()
        return self.users.get(user_id)

    def update_user(self, actor: Actor, command: UpdateUser) -> User:
        actor.require_admin()
        user = self.users.get(command.user_id)
        if "email" in command.changes:
            self._check_email_free(command.changes["email"], user.id)
        user.update_profile(**command.changes)
        self.users.add(user)
        logger.info("User updated by admin", user_id=user.id, admin_id=actor.user_id)
        return user

    def delete_user(self, actor: Actor, user_id: str) -> None:
        actor.require_admin()
        user = self.users.get(user_id)
        if user.profile_image and self.storage is not None:
            self.storage.delete(user.profile_image)
        self.users.delete(user)
        logger.info("User deleted", user_id=user.id, admin_id=actor.user_id)
