"""
Shared fixtures: an in-memory stand-in for the Supabase client, an app client with the
Supabase dependency overridden, and helpers for seeding rows and signing tokens.
"""

import os
import uuid
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any, Callable

import pytest

os.environ["SUPABASE_URL"] = "http://localhost:54321"
os.environ["SUPABASE_ANON_KEY"] = "test-anon-key"
os.environ["SUPABASE_SERVICE_KEY"] = "test-service-key"
os.environ["JWT_SECRET"] = "test-jwt-secret"
os.environ["ENVIRONMENT"] = "test"
os.environ["OPENROUTER_API_KEY"] = ""
os.environ["GEMINI_API_KEY"] = ""

from fastapi.testclient import TestClient  # noqa: E402

from iris_crm.core.config import get_settings  # noqa: E402

get_settings.cache_clear()

from iris_crm.core.security import create_access_token  # noqa: E402
from iris_crm.main import app  # noqa: E402
from iris_crm.services.supabase_service import SupabaseService, get_supabase_service  # noqa: E402


class FakeResponse:
    def __init__(self, data: Any) -> None:
        self.data = data


class FakeQuery:
    """Subset of the PostgREST query builder used by SupabaseService."""

    def __init__(self, client: "FakeSupabaseClient", table: str) -> None:
        self._client = client
        self._table = table
        self._op = "select"
        self._columns: list[str] | None = None
        self._payload: Any = None
        self._filters: list[Callable[[dict[str, Any]], bool]] = []
        self._order: tuple[str, bool] | None = None
        self._limit: int | None = None

    def select(self, columns: str = "*") -> "FakeQuery":
        self._op = "select"
        if columns.strip() != "*":
            self._columns = [c.strip() for c in columns.split(",")]
        return self

    def insert(self, data: dict[str, Any]) -> "FakeQuery":
        self._op = "insert"
        self._payload = data
        return self

    def update(self, data: dict[str, Any]) -> "FakeQuery":
        self._op = "update"
        self._payload = data
        return self

    def delete(self) -> "FakeQuery":
        self._op = "delete"
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self._filters.append(lambda r: r.get(column) == value)
        return self

    def in_(self, column: str, values: list[Any]) -> "FakeQuery":
        allowed = list(values)
        self._filters.append(lambda r: r.get(column) in allowed)
        return self

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self._order = (column, desc)
        return self

    def limit(self, n: int) -> "FakeQuery":
        self._limit = n
        return self

    def _matches(self, row: dict[str, Any]) -> bool:
        return all(f(row) for f in self._filters)

    def execute(self) -> FakeResponse:
        if self._table in self._client.failing_tables:
            raise Exception(f"relation {self._table} unavailable")
        rows = self._client.tables.setdefault(self._table, [])

        if self._op == "insert":
            row = self._client.with_defaults(dict(self._payload))
            rows.append(row)
            return FakeResponse([dict(row)])

        if self._op == "update":
            changed = []
            for row in rows:
                if self._matches(row):
                    row.update(self._payload)
                    row["updated_at"] = datetime.now(timezone.utc).isoformat()
                    changed.append(dict(row))
            return FakeResponse(changed)

        if self._op == "delete":
            removed = [r for r in rows if self._matches(r)]
            self._client.tables[self._table] = [r for r in rows if not self._matches(r)]
            return FakeResponse([dict(r) for r in removed])

        result = [dict(r) for r in rows if self._matches(r)]
        if self._order:
            column, desc = self._order
            present = [r for r in result if r.get(column) is not None]
            missing = [r for r in result if r.get(column) is None]
            present.sort(key=lambda r: r[column], reverse=desc)
            result = present + missing
        if self._limit is not None:
            result = result[: self._limit]
        if self._columns:
            result = [{c: r.get(c) for c in self._columns} for r in result]
        return FakeResponse(result)


class FakeRpc:
    def __init__(self, client: "FakeSupabaseClient", name: str, params: dict[str, Any]) -> None:
        self._client = client
        self._name = name
        self._params = params

    def execute(self) -> FakeResponse:
        self._client.rpc_calls.append((self._name, self._params))
        if self._name in self._client.failing_rpcs:
            raise Exception(f"function {self._name} failed")
        if self._name == "create_user_profile":
            pin = self._params["user_pin"]
            if any(p.get("pin") == pin for p in self._client.tables.setdefault("profiles", [])):
                raise Exception('duplicate key value violates unique constraint "profiles_pin_key"')
            row = self._client.with_defaults(
                {
                    "name": self._params["user_name"],
                    "pin": pin,
                    "Type": "Admin" if self._params.get("is_admin") else "User",
                    "user_id": None,
                }
            )
            self._client.tables["profiles"].append(row)
            return FakeResponse(row["id"])
        if self._name == "create_auth_user_for_pin":
            user_id = str(uuid.uuid4())
            self._client.auth_users.append({"id": user_id, "pin": self._params["pin_value"]})
            return FakeResponse(user_id)
        raise Exception(f"unknown function {self._name}")


class FakeAuthAdmin:
    def __init__(self, client: "FakeSupabaseClient") -> None:
        self._client = client

    def create_user(self, attributes: dict[str, Any]) -> SimpleNamespace:
        if self._client.auth_create_fails:
            raise Exception("A user with this email address has already been registered")
        user_id = str(uuid.uuid4())
        self._client.auth_users.append({"id": user_id, **attributes})
        return SimpleNamespace(user=SimpleNamespace(id=user_id, email=attributes.get("email")))


class FakeSupabaseClient:
    """In-memory tables keyed by name; rows are plain dicts with string ids."""

    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {
            "profiles": [],
            "accounts": [],
            "projects": [],
            "updates": [],
        }
        self.failing_tables: set[str] = set()
        self.failing_rpcs: set[str] = set()
        self.rpc_calls: list[tuple[str, dict[str, Any]]] = []
        self.auth_users: list[dict[str, Any]] = []
        self.auth_create_fails = False
        self.auth = SimpleNamespace(admin=FakeAuthAdmin(self))

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rpc(self, name: str, params: dict[str, Any]) -> FakeRpc:
        return FakeRpc(self, name, params)

    @staticmethod
    def with_defaults(row: dict[str, Any]) -> dict[str, Any]:
        now = datetime.now(timezone.utc).isoformat()
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", now)
        row.setdefault("updated_at", now)
        return row

    def seed(self, table: str, **fields: Any) -> dict[str, Any]:
        row = self.with_defaults(dict(fields))
        self.tables[table].append(row)
        return row


@pytest.fixture
def fake_client() -> FakeSupabaseClient:
    return FakeSupabaseClient()


@pytest.fixture
def supabase_service(fake_client: FakeSupabaseClient) -> SupabaseService:
    return SupabaseService(client=fake_client)


@pytest.fixture
def client(supabase_service: SupabaseService):
    app.dependency_overrides[get_supabase_service] = lambda: supabase_service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def user_profile(fake_client: FakeSupabaseClient) -> dict[str, Any]:
    return fake_client.seed(
        "profiles",
        name="Jane Doe",
        pin="123456",
        Type="User",
        user_id=str(uuid.uuid4()),
    )


@pytest.fixture
def admin_profile(fake_client: FakeSupabaseClient) -> dict[str, Any]:
    return fake_client.seed(
        "profiles",
        name="Ada Admin",
        pin="999999",
        Type="Admin",
        user_id=str(uuid.uuid4()),
    )


def bearer(profile: dict[str, Any]) -> dict[str, str]:
    token = create_access_token({"sub": profile["id"]})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(user_profile: dict[str, Any]) -> dict[str, str]:
    return bearer(user_profile)


@pytest.fixture
def admin_headers(admin_profile: dict[str, Any]) -> dict[str, str]:
    return bearer(admin_profile)
