"""
Credential endpoints of the auth service, and the local sign-in flows.

A successful login installs the bearer token on the shared session, so every
later call to the data and auth services carries it.
"""

from typing import Any

from loguru import logger

from storefront.models import AuthResult, SignInResult, User
from storefront.normalizers import extract_token, user_from_remote, user_to_remote
from storefront.resources.base import BaseResource
from storefront.resources.users import UsersResource
from storefront.services.client import ApiClient
from storefront.services.errors import RemoteError, ServiceError, SignupVerificationError
from storefront.services.transport import Service
from storefront.utils import log_operation

VERIFY_ATTEMPTS = 3
VERIFY_DELAY = 0.3


class AuthResource(BaseResource):
    """Login, signup and profile on the auth service."""

    def __init__(self, client: ApiClient | None = None, users: UsersResource | None = None):
        super().__init__(client)
        self.users = users or UsersResource(self.client)

    @property
    def path(self) -> str:
        return "/auth"

    @log_operation
    async def login(self, email: str, password: str) -> AuthResult:
        """
        Exchange credentials for a bearer token.

        Any previous credential is dropped first. A response without a
        recognizable token yields AuthResult(confirmed=False) rather than an
        error; remote failures propagate.
        """
        self.client.clear_credential()
        data = await self.client.post(
            f"{self.path}/login",
            json={"email": email, "password": password},
            service=Service.AUTH,
        )
        return self._accept_token(data)

    @log_operation
    async def signup(self, payload: User | dict[str, Any], verify: bool = False) -> AuthResult:
        """
        Register through the auth service.

        With verify=True the new account is looked up in the users collection
        (up to VERIFY_ATTEMPTS reads, VERIFY_DELAY seconds apart) and must
        carry a password hash.

        Raises:
            ConflictError: If the email is already in use
            SignupVerificationError: If verification finds no usable record
        """
        body = user_to_remote(payload)
        try:
            data = await self.client.post(
                f"{self.path}/signup",
                json=body,
                service=Service.AUTH,
            )
        except RemoteError as e:
            self.raise_if_duplicate(e)
            raise
        result = self._accept_token(data)
        if verify:
            await self._verify_signup(str(body.get("email", "")))
        return result

    async def _verify_signup(self, email: str) -> User:
        user = None
        for attempt in range(VERIFY_ATTEMPTS):
            if attempt:
                await self.client.sleep(VERIFY_DELAY)
            user = await self.users.find_by_email(email)
            if user is not None:
                break
        if user is None:
            raise SignupVerificationError(f"Signed up account {email} not found in users")
        if not user.password_hash:
            raise SignupVerificationError(f"Signed up account {email} has no password hash")
        logger.debug(f"Signup verified for user {user.id}")
        return user

    @log_operation
    async def me(self) -> User | None:
        """Profile of the credential holder."""
        data = await self.client.get(f"{self.path}/me", service=Service.AUTH)
        return user_from_remote(data)

    def logout(self) -> None:
        self.client.clear_credential()
        logger.info("Logged out")

    async def sign_in(self, email: str, password: str) -> SignInResult | None:
        """
        Local login: check the stored password, then try to obtain a token.

        The token step is best-effort; when the auth service fails the user
        stays signed in locally with an unconfirmed AuthResult.

        Returns:
            SignInResult, or None for unknown email / wrong password
        """
        user = await self.users.verify_password(email, password)
        if user is None:
            return None
        auth = await self._try_login(email, password)
        logger.info(f"Signed in {user.email} (token confirmed: {auth.confirmed})")
        return SignInResult(user=user, auth=auth)

    async def register(self, payload: User | dict[str, Any]) -> SignInResult:
        """
        Local registration: create the user on the data service (client role
        unless one is given), then try to obtain a token.
        """
        data = payload.model_dump(exclude_unset=True) if isinstance(payload, User) else dict(payload)
        created = await self.users.create(data)
        if created is None:
            created = User.model_validate({k: v for k, v in data.items() if k in User.model_fields})
        auth = await self._try_login(data.get("email", ""), data.get("password", ""))
        return SignInResult(user=created.without_secrets(), auth=auth)

    async def _try_login(self, email: str, password: str) -> AuthResult:
        try:
            return await self.login(email, password)
        except ServiceError as e:
            logger.warning(f"Auth token request failed, continuing without token: {e}")
            return AuthResult(confirmed=False)

    def _accept_token(self, data: Any) -> AuthResult:
        token = extract_token(data)
        if token is None:
            logger.warning("Auth response carried no token, credential left unset")
            return AuthResult(confirmed=False, raw=data)
        self.client.set_credential(token)
        return AuthResult(token=token, confirmed=True, raw=data)
