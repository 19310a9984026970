import re
import uuid
from collections import defaultdict
from datetime import datetime, timezone
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from agrom.common.enums import UserRole
from agrom.common.exceptions import ExternalServiceError, PermissionDeniedError
from agrom.common.security import create_access_token
from agrom.config import settings
from agrom.integrations.base import BaseIntegration

# alias:fk_column( inside a select list
_EMBED = re.compile(r"(\w+):(\w+)\(")
_FK_TABLES = {
    "contractor_id": "users_public",
    "producer_id": "users_public",
    "author_id": "users_public",
    "target_id": "users_public",
    "lot_id": "lots",
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class FakeSupabase(BaseIntegration):
    """In-memory stand-in for the hosted backend with the SupabaseClient surface."""

    def __init__(self):
        super().__init__("fake-supabase")
        self.tables: dict[str, list[dict[str, Any]]] = defaultdict(list)
        self.inserts: list[tuple[str, dict[str, Any]]] = []
        self.selects: list[tuple[str, dict[str, Any]]] = []
        self.rpc_calls: list[tuple[str, dict[str, Any] | None]] = []
        self.rpc_results: dict[str, Any] = {}
        self.failing_rpcs: set[str] = set()
        self.failing_uploads: set[str] = set()
        self.uploads: list[tuple[str, str]] = []
        self.accounts: dict[str, tuple[str, str]] = {}
        self.sign_ups: list[str] = []
        self.recoveries: list[tuple[str, str]] = []
        self.sign_outs = 0

    def seed(self, table: str, **row) -> dict[str, Any]:
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", _now())
        self.tables[table].append(row)
        return row

    def _embed(self, row: dict[str, Any], columns: str) -> dict[str, Any]:
        out = dict(row)
        for alias, fk in _EMBED.findall(columns):
            target = self.tables[_FK_TABLES[fk]]
            out[alias] = next((dict(t) for t in target if t["id"] == row.get(fk)), None)
        return out

    async def health_check(self) -> bool:
        return True

    async def select(self, table, *, columns="*", filters=None, order="created_at.desc", limit=None):
        self.selects.append((table, dict(filters or {})))
        rows = [
            r for r in self.tables[table]
            if all(str(r.get(k)) == str(v) for k, v in (filters or {}).items())
        ]
        if order:
            key, _, direction = order.partition(".")
            rows = sorted(rows, key=lambda r: str(r.get(key) or ""), reverse=direction == "desc")
        if limit is not None:
            rows = rows[:limit]
        return [self._embed(r, columns) for r in rows]

    async def select_one(self, table, *, columns="*", filters=None):
        rows = await self.select(table, columns=columns, filters=filters, order=None, limit=1)
        return rows[0] if rows else None

    async def insert(self, table, row):
        self.inserts.append((table, dict(row)))
        return dict(self.seed(table, **row))

    async def update(self, table, values, filters):
        updated = []
        for r in self.tables[table]:
            if all(str(r.get(k)) == str(v) for k, v in filters.items()):
                r.update(values)
                updated.append(dict(r))
        return updated

    async def rpc(self, function, params=None):
        self.rpc_calls.append((function, params))
        if function in self.failing_rpcs:
            raise ExternalServiceError("supabase", f"{function} failed")
        return self.rpc_results.get(function)

    async def sign_up(self, email, password):
        self.sign_ups.append(email)
        return {"id": str(uuid.uuid4()), "email": email}

    async def sign_in_with_password(self, email, password):
        account = self.accounts.get(email)
        if account is None or account[1] != password:
            raise PermissionDeniedError("Correo o contraseña incorrectos")
        user_id = account[0]
        token = create_access_token({"sub": user_id, "email": email})
        return {"access_token": token, "expires_in": 3600, "user": {"id": user_id}}

    async def sign_out(self):
        self.sign_outs += 1

    async def reset_password_for_email(self, email, redirect_to):
        self.recoveries.append((email, redirect_to))

    async def upload_object(self, bucket, path, content, content_type="application/octet-stream"):
        if any(name in path for name in self.failing_uploads):
            raise ExternalServiceError("supabase", "upload rejected")
        self.uploads.append((bucket, path))

    def public_url(self, bucket, path):
        return f"{settings.SUPABASE_URL}/storage/v1/object/public/{bucket}/{path}"


@pytest.fixture
def backend():
    return FakeSupabase()


@pytest.fixture
async def client(backend):
    from agrom.api.deps import get_backend
    from agrom.main import app

    app.dependency_overrides[get_backend] = lambda: backend

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


def _user(backend: FakeSupabase, name: str, role: UserRole, location: str, phone: str) -> dict[str, Any]:
    return backend.seed(
        "users_public",
        name=name,
        role=role.value,
        base_location=location,
        phone=phone,
        reputation_avg=0,
        reputation_count=0,
    )


@pytest.fixture
def producer(backend):
    return _user(backend, "Juan Pérez", UserRole.PRODUCER, "Pergamino", "+54 9 11 1234-5678")


@pytest.fixture
def contractor(backend):
    return _user(backend, "Ana Gómez", UserRole.CONTRACTOR, "Junín", "+54 9 236 555-0101")


@pytest.fixture
def dual_user(backend):
    return _user(backend, "Carlos Ruiz", UserRole.BOTH, "Rojas", "2475 40-1234")


def token_for(user: dict[str, Any]) -> str:
    return create_access_token({"sub": user["id"], "email": f"{user['id']}@test.com"})


def bearer(user: dict[str, Any]) -> dict[str, str]:
    return {"Authorization": f"Bearer {token_for(user)}"}


@pytest.fixture
def producer_headers(producer):
    return bearer(producer)


@pytest.fixture
def contractor_headers(contractor):
    return bearer(contractor)


@pytest.fixture
def dual_headers(dual_user):
    return bearer(dual_user)


@pytest.fixture
def headers_for():
    return bearer
