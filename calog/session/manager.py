"""Session lifecycle on top of SessionClient: login, logout, refresh, restore.

The client only knows the access token. This layer owns the refresh token
and the cached user, and is what the client's unauthorized callback tears
down.
"""

from __future__ import annotations

import asyncio
from typing import Protocol

import structlog

from calog.session.client import SessionClient
from calog.session.endpoints import AuthApi
from calog.session.errors import SessionError
from calog.session.models import User

logger = structlog.get_logger(__name__)


class TokenStore(Protocol):
    async def save_refresh_token(self, token: str) -> None: ...

    async def load_refresh_token(self) -> str | None: ...

    async def save_user(self, user: User) -> None: ...

    async def load_user(self) -> User | None: ...

    async def clear(self) -> None: ...


class InMemoryTokenStore:
    def __init__(self) -> None:
        self._refresh_token: str | None = None
        self._user: User | None = None

    async def save_refresh_token(self, token: str) -> None:
        self._refresh_token = token

    async def load_refresh_token(self) -> str | None:
        return self._refresh_token

    async def save_user(self, user: User) -> None:
        self._user = user

    async def load_user(self) -> User | None:
        return self._user

    async def clear(self) -> None:
        self._refresh_token = None
        self._user = None


class AuthSession:
    def __init__(self, client: SessionClient, store: TokenStore | None = None) -> None:
        self._client = client
        self._auth = AuthApi(client)
        self._store: TokenStore = store if store is not None else InMemoryTokenStore()
        self._user: User | None = None
        # Bumped on every login so a teardown that started earlier leaves it alone.
        self._generation = 0
        self._teardown: asyncio.Task[None] | None = None
        client.set_unauthorized_callback(self.logout)

    @property
    def user(self) -> User | None:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._client.is_authenticated

    async def _start(self, access_token: str, refresh_token: str | None, user: User) -> None:
        self._generation += 1
        self._client.set_access_token(access_token)
        if refresh_token:
            await self._store.save_refresh_token(refresh_token)
        await self._store.save_user(user)
        self._user = user

    async def login(self, email: str, password: str) -> User:
        response = await self._auth.login(email, password)
        await self._start(response.access_token, response.refresh_token, response.user)
        logger.info("logged in", user_id=response.user.id)
        return response.user

    async def signup(self, full_name: str, email: str, password: str) -> User:
        response = await self._auth.signup(full_name, email, password)
        await self._start(response.access_token, response.refresh_token, response.user)
        logger.info("signed up", user_id=response.user.id)
        return response.user

    async def logout(self) -> None:
        """Tear the session down. Safe to call repeatedly or concurrently.

        A call made while a teardown is running waits for it and then runs
        its own, which is a no-op unless a login slipped in between. The
        server call inside a teardown may 401 back into here; that nested
        call returns at once.
        """
        while self._teardown is not None:
            if self._teardown is asyncio.current_task():
                return
            await asyncio.shield(self._teardown)
        self._teardown = asyncio.ensure_future(self._end_session(self._generation))
        await asyncio.shield(self._teardown)

    async def _end_session(self, generation: int) -> None:
        try:
            refresh_token = await self._store.load_refresh_token()
            if refresh_token:
                try:
                    await self._auth.logout(refresh_token)
                except SessionError as exc:
                    # Server-side revoke is best effort; local state goes regardless.
                    logger.warning("server logout failed", error=exc.message)
            if generation != self._generation:
                logger.info("logout superseded by a newer login")
                return
            await self._store.clear()
            self._client.set_access_token(None)
            self._user = None
            logger.info("logged out")
        finally:
            self._teardown = None

    async def refresh(self) -> bool:
        """Swap the stored refresh token for a new access token.

        The refresh token itself is kept. Any failure logs out.
        """
        refresh_token = await self._store.load_refresh_token()
        if not refresh_token:
            logger.info("refresh skipped, no refresh token")
            await self.logout()
            return False
        try:
            response = await self._auth.refresh_token(refresh_token)
        except SessionError as exc:
            logger.warning("token refresh failed", error=exc.message)
            await self.logout()
            return False
        self._client.set_access_token(response.access_token)
        logger.info("access token refreshed")
        return True

    async def restore(self) -> User | None:
        """App start: refresh, then load the user from the store or /auth/me."""
        if not await self.refresh():
            return None
        user = await self._store.load_user()
        if user is None:
            user = await self._auth.current_user()
            await self._store.save_user(user)
        self._user = user
        return user
