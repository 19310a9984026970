"""Hosted backend client.

Talks to the PostgREST, RPC, auth and storage endpoints of the Supabase
project over plain HTTP. Every call is made on behalf of the signed-in user
(their access token is forwarded) so the backend's row-level security
decides what each caller may read and write.
"""

from __future__ import annotations

from typing import Any

import httpx

from agrom.common.exceptions import ExternalServiceError, PermissionDeniedError
from agrom.config import settings
from agrom.integrations.base import BaseIntegration


def _error_message(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return resp.text or f"HTTP {resp.status_code}"
    if isinstance(data, dict):
        for key in ("message", "msg", "error_description", "error"):
            if data.get(key):
                return str(data[key])
    return f"HTTP {resp.status_code}"


def _eq_params(filters: dict[str, Any] | None) -> dict[str, str]:
    return {column: f"eq.{value}" for column, value in (filters or {}).items()}


class SupabaseClient(BaseIntegration):
    """REST client for one caller's session against the hosted backend."""

    def __init__(
        self,
        access_token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__("supabase")
        self.access_token = access_token
        self._transport = transport

    def _headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        headers = {
            "apikey": settings.SUPABASE_ANON_KEY,
            "Authorization": f"Bearer {self.access_token or settings.SUPABASE_ANON_KEY}",
        }
        if extra:
            headers.update(extra)
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        try:
            async with httpx.AsyncClient(
                base_url=settings.SUPABASE_URL,
                timeout=settings.BACKEND_TIMEOUT_SECONDS,
                transport=self._transport,
            ) as client:
                return await client.request(
                    method, path, params=params, json=json, content=content,
                    headers=self._headers(headers),
                )
        except httpx.HTTPError as e:
            self.logger.error("Backend unreachable: %s %s: %s", method, path, e)
            raise ExternalServiceError("supabase", "no se pudo conectar con el servidor") from e

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        resp = await self._request(method, path, **kwargs)
        if resp.status_code >= 400:
            message = _error_message(resp)
            self.logger.error("Backend error: %s %s -> %d %s", method, path, resp.status_code, message)
            raise ExternalServiceError("supabase", message)
        return resp

    async def health_check(self) -> bool:
        try:
            resp = await self._request("GET", "/auth/v1/health")
            return resp.status_code == 200
        except ExternalServiceError:
            return False

    # ---------- Rows ----------

    async def select(
        self,
        table: str,
        *,
        columns: str = "*",
        filters: dict[str, Any] | None = None,
        order: str | None = "created_at.desc",
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        params: dict[str, Any] = {"select": columns, **_eq_params(filters)}
        if order:
            params["order"] = order
        if limit is not None:
            params["limit"] = limit
        resp = await self._send("GET", f"/rest/v1/{table}", params=params)
        rows = resp.json()
        self.logger.debug("Selected %d rows from %s", len(rows), table)
        return rows

    async def select_one(
        self, table: str, *, columns: str = "*", filters: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        rows = await self.select(table, columns=columns, filters=filters, order=None, limit=1)
        return rows[0] if rows else None

    async def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        resp = await self._send(
            "POST", f"/rest/v1/{table}", json=row, headers={"Prefer": "return=representation"},
        )
        created = resp.json()
        self.logger.info("Inserted row into %s", table)
        return created[0] if isinstance(created, list) and created else created

    async def update(
        self, table: str, values: dict[str, Any], filters: dict[str, Any],
    ) -> list[dict[str, Any]]:
        resp = await self._send(
            "PATCH", f"/rest/v1/{table}", params=_eq_params(filters), json=values,
            headers={"Prefer": "return=representation"},
        )
        self.logger.info("Updated %s where %s", table, ", ".join(filters))
        return resp.json()

    async def rpc(self, function: str, params: dict[str, Any] | None = None) -> Any:
        resp = await self._send("POST", f"/rest/v1/rpc/{function}", json=params or {})
        if not resp.content:
            return None
        return resp.json()

    # ---------- Auth ----------

    async def sign_up(self, email: str, password: str) -> dict[str, Any]:
        resp = await self._send("POST", "/auth/v1/signup", json={"email": email, "password": password})
        self.logger.info("Sign-up requested for %s", email)
        return resp.json()

    async def sign_in_with_password(self, email: str, password: str) -> dict[str, Any]:
        resp = await self._request(
            "POST", "/auth/v1/token", params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        if resp.status_code in (400, 401):
            self.logger.info("Rejected sign-in for %s", email)
            raise PermissionDeniedError("Correo o contraseña incorrectos")
        if resp.status_code >= 400:
            message = _error_message(resp)
            self.logger.error("Sign-in failed: %d %s", resp.status_code, message)
            raise ExternalServiceError("supabase", message)
        return resp.json()

    async def sign_out(self) -> None:
        await self._send("POST", "/auth/v1/logout")

    async def reset_password_for_email(self, email: str, redirect_to: str) -> None:
        await self._send(
            "POST", "/auth/v1/recover", params={"redirect_to": redirect_to}, json={"email": email},
        )
        self.logger.info("Password recovery requested for %s", email)

    # ---------- Storage ----------

    async def upload_object(
        self, bucket: str, path: str, content: bytes, content_type: str = "application/octet-stream",
    ) -> None:
        await self._send(
            "POST", f"/storage/v1/object/{bucket}/{path}", content=content,
            headers={"Content-Type": content_type},
        )

    def public_url(self, bucket: str, path: str) -> str:
        return f"{settings.SUPABASE_URL}/storage/v1/object/public/{bucket}/{path}"
