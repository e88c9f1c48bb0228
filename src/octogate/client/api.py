import logging
from typing import Any

import httpx
from pydantic import ValidationError

from octogate.core.exceptions import BackendError
from octogate.core.settings import ClientSettings
from octogate.models import ExchangeResult, UserProfile

logger = logging.getLogger(__name__)


class BackendClient:
    """HTTP client for the login API.

    Attributes:
        settings: Base URL and timeouts of the login API
        transport: Optional httpx transport, e.g. ``httpx.ASGITransport`` to talk to an app in process
    """

    def __init__(
        self,
        settings: ClientSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or ClientSettings()
        self.transport = transport

    def _client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.settings.api_base_url,
            timeout=httpx.Timeout(timeout),
            transport=self.transport,
            headers={"Content-Type": "application/json"},
        )

    @staticmethod
    def _payload(response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if response.is_error:
            message = data.get("message") or f"HTTP {response.status_code}: {response.reason_phrase}"
            raise BackendError(message, status_code=response.status_code)
        if not data.get("success"):
            raise BackendError(data.get("message") or "backend call failed", status_code=response.status_code)
        return data

    async def exchange_code(self, code: str, state: str | None) -> ExchangeResult:
        """Hand the authorization code to the backend and receive a session."""
        try:
            async with self._client(self.settings.request_timeout) as client:
                response = await client.post("/api/auth/github/callback", json={"code": code, "state": state})
        except httpx.HTTPError as e:
            msg = f"backend unreachable: {e}"
            raise BackendError(msg) from e

        data = self._payload(response)
        try:
            return ExchangeResult.model_validate(data)
        except ValidationError as e:
            msg = "backend returned a malformed login response"
            raise BackendError(msg) from e

    async def get_user(self, token: str) -> UserProfile:
        try:
            async with self._client(self.settings.request_timeout) as client:
                response = await client.get("/api/auth/user", headers={"Authorization": f"Bearer {token}"})
        except httpx.HTTPError as e:
            msg = f"backend unreachable: {e}"
            raise BackendError(msg) from e

        data = self._payload(response)
        try:
            return UserProfile.model_validate(data.get("user"))
        except ValidationError as e:
            msg = "backend returned a malformed user"
            raise BackendError(msg) from e

    async def logout(self, token: str) -> None:
        try:
            async with self._client(self.settings.request_timeout) as client:
                response = await client.post("/api/auth/logout", headers={"Authorization": f"Bearer {token}"})
        except httpx.HTTPError as e:
            msg = f"backend unreachable: {e}"
            raise BackendError(msg) from e
        self._payload(response)

    async def check_health(self) -> bool:
        try:
            async with self._client(self.settings.health_timeout) as client:
                response = await client.get("/api/health")
        except httpx.HTTPError as e:
            logger.warning("Backend health check failed: %s", e)
            return False
        return response.is_success
