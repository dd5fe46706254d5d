"""Identity provider backend API client.

ViRA does not store credentials. Accounts live at a Clerk-style identity
provider and ViRA manages them through its backend REST API, authenticated
with a Bearer secret key:

- ``POST   /users``            create a user with a password
- ``PATCH  /users/{user_id}``  set a new password
- ``DELETE /users/{user_id}``  delete a user (used for compensation)

Non-2xx answers and transport failures raise ``IdentityProviderError``.
"""

from __future__ import annotations

import secrets
import string
from typing import Any, Dict, Optional

import httpx

from vira.core.errors import ExternalServiceError
from vira.core.logging_config import get_logger
from vira.server.core.config import settings

logger = get_logger(__name__)

_PASSWORD_ALPHABET = string.ascii_letters + string.digits


class IdentityProviderError(ExternalServiceError):
    """Raised when the identity provider rejects or fails a request."""

    def __init__(self, message: str, *, provider_status: Optional[int] = None, details: Optional[Any] = None) -> None:
        super().__init__(message, details=details)
        self.provider_status = provider_status


def generate_temporary_password(length: int = 14) -> str:
    """Random password with at least one lower, upper and digit character, plus a symbol."""
    while True:
        core = "".join(secrets.choice(_PASSWORD_ALPHABET) for _ in range(length - 1))
        if any(c.islower() for c in core) and any(c.isupper() for c in core) and any(c.isdigit() for c in core):
            return core + secrets.choice("!@#$%")


def _split_name(full_name: Optional[str]) -> Dict[str, str]:
    if not full_name or not full_name.strip():
        return {}
    first, _, last = full_name.strip().partition(" ")
    names = {"first_name": first}
    if last.strip():
        names["last_name"] = last.strip()
    return names


class IdentityProviderClient:
    """Async client for the identity provider's user management API."""

    def __init__(
        self,
        base_url: str,
        *,
        secret_key: Optional[str],
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.secret_key = secret_key
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None

    @classmethod
    def from_settings(cls, client: Optional[httpx.AsyncClient] = None) -> "IdentityProviderClient":
        config = settings.identity
        return cls(
            config.api_url,
            secret_key=config.secret_key.get_secret_value() if config.secret_key else None,
            client=client,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _headers(self) -> Dict[str, str]:
        if not self.secret_key:
            raise IdentityProviderError("Identity provider is not configured")
        return {"Authorization": f"Bearer {self.secret_key}", "Content-Type": "application/json"}

    async def _request(self, method: str, path: str, operation: str, json: Optional[Dict[str, Any]] = None) -> Any:
        headers = self._headers()
        try:
            r = await self._client.request(method, f"{self.base_url}{path}", headers=headers, json=json)
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise IdentityProviderError(
                f"Identity provider {operation} failed: {e.response.status_code}",
                provider_status=e.response.status_code,
                details=e.response.text,
            ) from e
        except httpx.HTTPError as e:
            raise IdentityProviderError(f"Identity provider {operation} request failed: {e}") from e
        if not r.content:
            return {}
        try:
            return r.json()
        except ValueError:
            return {}

    async def create_user(self, email: str, password: str, full_name: Optional[str] = None) -> str:
        """Create a user and return the provider's user id."""
        payload: Dict[str, Any] = {
            "email_address": [email],
            "password": password,
            "skip_password_checks": True,
            **_split_name(full_name),
        }
        data = await self._request("POST", "/users", "create_user", json=payload)
        user_id = data.get("id") if isinstance(data, dict) else None
        if not user_id:
            raise IdentityProviderError("Unexpected response shape from create_user", details=data)
        logger.info(f"Created identity provider user {user_id} for {email}")
        return str(user_id)

    async def delete_user(self, user_id: str) -> None:
        await self._request("DELETE", f"/users/{user_id}", "delete_user")
        logger.info(f"Deleted identity provider user {user_id}")

    async def set_password(self, user_id: str, password: str) -> None:
        payload = {"password": password, "skip_password_checks": True, "sign_out_of_other_sessions": True}
        await self._request("PATCH", f"/users/{user_id}", "set_password", json=payload)
        logger.info(f"Reset password for identity provider user {user_id}")
