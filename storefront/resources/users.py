"""
Users (backend table `user`).
"""

from typing import Any

from loguru import logger

from storefront.models import User
from storefront.normalizers import user_from_remote, user_to_remote
from storefront.resources.base import BaseResource
from storefront.services.errors import RemoteError, ServiceError, ValidationError
from storefront.utils import log_operation

REQUIRED_SIGNUP_FIELDS = ("nombre", "apellidos", "email", "password")


class UsersResource(BaseResource):
    """Users facade (admin listing, registration, profile edits)."""

    @property
    def path(self) -> str:
        return "/user"

    @log_operation
    async def list_all(self, ttl: int | None = None) -> list[User]:
        records = await self._cached_list(self.path, ttl)
        users = [user for user in map(user_from_remote, records) if user is not None]
        logger.info(f"Fetched {len(users)} users")
        return users

    @log_operation
    async def get_by_id(self, user_id: Any) -> User | None:
        data = await self.client.get(self.item_path(user_id))
        return user_from_remote(data)

    @log_operation
    async def get_raw_by_id(self, user_id: Any) -> Any:
        """Unmapped backend record, for diagnostics."""
        return await self.client.get(self.item_path(user_id))

    @log_operation
    async def create(self, payload: User | dict[str, Any]) -> User | None:
        """
        Register a user. The role defaults to client.

        Raises:
            ValidationError: If nombre, apellidos, email or password is missing
            ConflictError: If the email is already registered
        """
        data = payload.model_dump(exclude_unset=True) if isinstance(payload, User) else dict(payload)
        missing = [name for name in REQUIRED_SIGNUP_FIELDS if not data.get(name)]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        try:
            created = await self.client.post(self.path, json=user_to_remote(data))
        except RemoteError as e:
            self.raise_if_duplicate(e)
            raise
        finally:
            self.invalidate()

        user = user_from_remote(created)
        logger.info(f"User created: {user.email if user else None}")
        return user

    @log_operation
    async def update(self, user_id: Any, payload: User | dict[str, Any]) -> User | None:
        """Partial update: only the supplied fields are sent."""
        try:
            data = await self.client.patch(
                self.item_path(user_id), json=user_to_remote(payload, partial=True)
            )
        except RemoteError as e:
            self.raise_if_duplicate(e)
            raise
        finally:
            self.invalidate()
        return user_from_remote(data)

    @log_operation
    async def delete(self, user_id: Any) -> None:
        try:
            await self.client.delete(self.item_path(user_id))
        finally:
            self.invalidate()
        logger.info(f"User deleted: {user_id}")

    async def find_by_email(self, email: str) -> User | None:
        """
        Look a user up by email with a fresh, uncached read of the collection.

        Fallback: returns None when the backend read fails (logged), so the
        login screen can report bad credentials instead of crashing.
        """
        try:
            records = await self.client.get(self.path)
        except ServiceError as e:
            logger.error(f"Failed to look up user by email: {e}")
            return None

        wanted = email.strip().lower()
        for record in records if isinstance(records, list) else []:
            user = user_from_remote(record)
            if user is not None and user.email.strip().lower() == wanted:
                return user
        return None

    async def verify_password(self, email: str, password: str) -> User | None:
        """
        Local credential check against the stored `password` column.

        WARNING: plaintext comparison. The backend keeps passwords unhashed for
        this flow; replace with a server-side hash check before production.

        Returns:
            The matching user without secrets, or None
        """
        user = await self.find_by_email(email)
        if user is None or user.password is None:
            return None
        if user.password != password:
            logger.info(f"Password mismatch for {user.email}")
            return None
        return user.without_secrets()
