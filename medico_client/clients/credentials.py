"""
Credential store port and in-memory implementation.

Persistent token storage belongs to the host application; the client only
needs to read the bearer token and to purge credentials on forced logout.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class ICredentialStore(Protocol):
    """Source of the bearer credential."""

    async def get_access_token(self) -> str | None:
        """Return the current access token, or None when logged out."""
        ...

    async def purge(self) -> None:
        """Remove access token, refresh token and cached user data."""
        ...


class InMemoryCredentialStore:
    """Credential store kept in process memory.

    Example:
        store = InMemoryCredentialStore(access_token="abc")
        async with MedicoAPIClient(credential_store=store) as client:
            ...
    """

    def __init__(
        self,
        access_token: str | None = None,
        refresh_token: str | None = None,
        user_data: dict | None = None,
    ):
        self.access_token = access_token
        self.refresh_token = refresh_token
        self.user_data = user_data or {}
        self.purge_count = 0

    async def get_access_token(self) -> str | None:
        return self.access_token

    def store(self, access_token: str, refresh_token: str | None = None, user_data: dict | None = None) -> None:
        self.access_token = access_token
        self.refresh_token = refresh_token
        self.user_data = user_data or {}

    @property
    def is_authenticated(self) -> bool:
        return bool(self.access_token)

    async def purge(self) -> None:
        self.access_token = None
        self.refresh_token = None
        self.user_data = {}
        self.purge_count += 1
        logger.info("Local credentials purged")
