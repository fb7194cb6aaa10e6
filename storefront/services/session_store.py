# storefront/services/session_store.py

"""Owned session context: login, logout and restoration."""

import asyncio
import logging

from storefront.config.settings import Settings
from storefront.errors import AuthenticationError
from storefront.models.session import Session
from storefront.services.api_client import ProductRepositoryClient
from storefront.storage.local_storage import LocalStorage

logger = logging.getLogger("storefront.session")


class SessionStore:
    """Holds the current identity and persists it on every transition.

    Components receive this object explicitly and only read it through
    ``current``/``is_admin``; ``login`` and ``logout`` are the only
    writers.  Passwords are compared in plain text, as the backend
    stores them; this is not a hardened authentication scheme.
    """

    def __init__(
        self,
        client: ProductRepositoryClient,
        storage: LocalStorage | None = None,
    ) -> None:
        self.client = client
        self.storage = storage or LocalStorage()
        self._key = Settings.SESSION_KEY
        self._current: Session | None = self._restore()

    def _restore(self) -> Session | None:
        raw = self.storage.get_item(self._key)
        if raw is None:
            return None
        try:
            session = Session.from_dict(raw)
        except ValueError as exc:
            logger.warning("Discarding malformed stored session: %s", exc)
            self.storage.remove_item(self._key)
            return None
        logger.info("Restored session for '%s'", session.username)
        return session

    @property
    def current(self) -> Session | None:
        return self._current

    @property
    def is_authenticated(self) -> bool:
        return self._current is not None

    @property
    def is_admin(self) -> bool:
        return (
            self._current is not None
            and self._current.role == Settings.ADMIN_ROLE
        )

    async def login(self, username: str, password: str) -> Session:
        """Match credentials against the backend account list."""
        accounts = await asyncio.to_thread(self.client.list_accounts)
        for account in accounts:
            if account.username == username and account.password == password:
                session = Session(username=account.username, role=account.role)
                self._current = session
                self.storage.set_item(self._key, session.to_dict())
                logger.info(
                    "Logged in as '%s' (role=%s)", username, account.role,
                )
                return session

        logger.warning("Failed login attempt for '%s'", username)
        raise AuthenticationError("Invalid credentials")

    def logout(self) -> None:
        """Forget the current identity and its persisted copy."""
        if self._current is not None:
            logger.info("Logged out '%s'", self._current.username)
        self._current = None
        self.storage.remove_item(self._key)
