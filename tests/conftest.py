"""
Pytest configuration and fixtures for hiprompt tests.

FakeGateway stands in for the Supabase project: FakeAuth keeps users and
the current session in memory and emits auth events like the real client,
FakeDatabase evaluates QuerySpecs over dict tables the way PostgREST would.
"""

import asyncio
import re
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import pytest

from hiprompt.errors import AuthApiError, GatewayError
from hiprompt.gateway.base import SignUpResponse, Subscription
from hiprompt.gateway.query import Filter, OrFilter, QueryBuilder, QuerySpec
from hiprompt.models.session import AuthEvent, AuthSession, Identity

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)

ADA_ID = "user-ada"
BOB_ID = "user-bob"

_ROW_DEFAULTS = {
    "prompts": {
        "description": None,
        "category_id": None,
        "is_public": True,
        "tags": None,
        "likes_count": 0,
        "views_count": 0,
    },
}


def _matches(row: dict, item: Any) -> bool:
    if isinstance(item, OrFilter):
        return any(_matches(row, f) for f in item.filters)

    assert isinstance(item, Filter)
    value = row.get(item.column)
    if item.op in ("eq", "is"):
        return value == item.value
    if item.op == "neq":
        return value != item.value
    if item.op == "in":
        return value in item.value
    if item.op in ("like", "ilike"):
        if value is None:
            return False
        regex = "^" + re.escape(item.value).replace("%", ".*").replace("_", ".") + "$"
        flags = re.IGNORECASE if item.op == "ilike" else 0
        return re.match(regex, str(value), flags) is not None
    if value is None:
        return False
    return {
        "gt": value > item.value,
        "gte": value >= item.value,
        "lt": value < item.value,
        "lte": value <= item.value,
    }[item.op]


class FakeDatabase:
    """In-memory PostgREST: dict rows per table, filters, ordering, counts."""

    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.calls: list[QuerySpec] = []
        self._failures: list[tuple[str, Optional[str], GatewayError]] = []
        self._ticks = 0

    def _now(self) -> str:
        self._ticks += 1
        return (BASE_TIME + timedelta(days=30, minutes=self._ticks)).isoformat()

    def seed(self, table: str, *rows: dict) -> None:
        for row in rows:
            self._insert_row(table, dict(row))

    def rows(self, table: str) -> list[dict]:
        return self.tables.setdefault(table, [])

    def row(self, table: str, row_id: str) -> Optional[dict]:
        return next((r for r in self.rows(table) if r["id"] == row_id), None)

    def fail(self, table: str, error: GatewayError, method: Optional[str] = None) -> None:
        """Make the next call on `table` (optionally of one method) raise `error`."""
        self._failures.append((table, method, error))

    def _insert_row(self, table: str, payload: dict) -> dict:
        if table == "prompt_likes":
            for existing in self.rows(table):
                if (existing["prompt_id"], existing["user_id"]) == (payload["prompt_id"], payload["user_id"]):
                    raise GatewayError(
                        "duplicate key value violates unique constraint", status=409, code="23505"
                    )
        row = {**_ROW_DEFAULTS.get(table, {}), **payload}
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", self._now())
        if table == "prompts":
            row.setdefault("updated_at", row["created_at"])
        self.rows(table).append(row)
        return row

    def _present(self, table: str, row: dict, columns: str) -> dict:
        result = dict(row)
        if table == "prompts" and "categories(" in columns:
            category = self.row("categories", row.get("category_id") or "")
            result["categories"] = {"name": category["name"]} if category else None
        if table == "prompts" and "profiles:author_id(" in columns:
            profile = self.row("profiles", row.get("author_id") or "")
            result["profiles"] = (
                {"full_name": profile.get("full_name"), "username": profile.get("username")} if profile else None
            )
        return result

    async def run(self, spec: QuerySpec) -> tuple[list[dict], Optional[int]]:
        # Yield once like a real round trip so concurrent loads interleave
        await asyncio.sleep(0)
        self.calls.append(spec)
        for index, (table, method, error) in enumerate(self._failures):
            if table == spec.table and method in (None, spec.method):
                del self._failures[index]
                raise error

        if spec.method == "insert":
            payloads = spec.payload if isinstance(spec.payload, list) else [spec.payload]
            inserted = [self._insert_row(spec.table, dict(p)) for p in payloads]
            return [self._present(spec.table, r, spec.columns) for r in inserted], None

        matched = [r for r in self.rows(spec.table) if all(_matches(r, f) for f in spec.filters)]

        if spec.method == "update":
            for row in matched:
                row.update(spec.payload)
        elif spec.method == "delete":
            self.tables[spec.table] = [r for r in self.rows(spec.table) if r not in matched]

        for column, desc in reversed(spec.orders):
            matched.sort(key=lambda r: (r.get(column) is not None, r.get(column)), reverse=desc)

        total = len(matched) if spec.count else None
        if spec.limit is not None:
            matched = matched[: spec.limit]
        return [self._present(spec.table, r, spec.columns) for r in matched], total


class FakeAuth:
    """In-memory auth provider emitting the same events as AuthClient."""

    def __init__(self, autoconfirm: bool = True):
        self.autoconfirm = autoconfirm
        self.users: dict[str, tuple[str, Identity]] = {}
        self.session: Optional[AuthSession] = None
        self.sign_out_calls = 0
        self._listeners: dict[int, Any] = {}
        self._next_listener = 0
        self._failures: list[GatewayError] = []

    def add_user(self, email: str, password: str, full_name: Optional[str] = None, user_id: Optional[str] = None):
        identity = Identity(
            id=user_id or f"user-{len(self.users) + 1}",
            email=email,
            created_at=BASE_TIME,
            user_metadata={"full_name": full_name} if full_name else {},
        )
        self.users[email] = (password, identity)
        return identity

    def session_for(self, identity: Identity) -> AuthSession:
        return AuthSession(
            access_token=f"access-{identity.id}",
            refresh_token=f"refresh-{identity.id}",
            expires_in=3600,
            user=identity,
        )

    def fail_next(self, error: GatewayError) -> None:
        self._failures.append(error)

    def _raise_pending(self) -> None:
        if self._failures:
            raise self._failures.pop(0)

    def emit(self, event: AuthEvent, session: Optional[AuthSession]) -> None:
        """Simulate an event raised by the provider itself (refresh, remote sign-out)."""
        self.session = session
        self._notify(event, session)

    def _notify(self, event: AuthEvent, session: Optional[AuthSession]) -> None:
        for callback in list(self._listeners.values()):
            callback(event, session)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def on_auth_state_change(self, callback) -> Subscription:
        key = self._next_listener
        self._next_listener += 1
        self._listeners[key] = callback
        return Subscription(lambda: self._listeners.pop(key, None))

    async def get_session(self) -> Optional[AuthSession]:
        self._raise_pending()
        return self.session

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        self._raise_pending()
        stored = self.users.get(email)
        if stored is None or stored[0] != password:
            raise AuthApiError("Invalid login credentials", status=400, code="invalid_credentials")
        self.session = self.session_for(stored[1])
        self._notify(AuthEvent.SIGNED_IN, self.session)
        return self.session

    async def sign_up(self, email: str, password: str, metadata: Optional[dict] = None) -> SignUpResponse:
        self._raise_pending()
        if email in self.users:
            raise AuthApiError("User already registered", status=422, code="user_already_exists")
        identity = Identity(id=f"user-{len(self.users) + 1}", email=email, user_metadata=metadata or {})
        self.users[email] = (password, identity)
        if not self.autoconfirm:
            return SignUpResponse(user=identity)
        self.session = self.session_for(identity)
        self._notify(AuthEvent.SIGNED_IN, self.session)
        return SignUpResponse(user=identity, session=self.session)

    async def sign_out(self) -> None:
        self._raise_pending()
        self.sign_out_calls += 1
        if self.session is None:
            return
        self.session = None
        self._notify(AuthEvent.SIGNED_OUT, None)

    def update_metadata(self, email: str, **metadata) -> Identity:
        """Change a user's metadata on the provider side only."""
        password, identity = self.users[email]
        identity = identity.model_copy(update={"user_metadata": {**identity.user_metadata, **metadata}})
        self.users[email] = (password, identity)
        return identity

    async def get_user(self) -> Optional[Identity]:
        self._raise_pending()
        if self.session is None:
            return None
        current = next((i for _, i in self.users.values() if i.id == self.session.user.id), None)
        if current is not None and current != self.session.user:
            self.session = self.session.model_copy(update={"user": current})
            self._notify(AuthEvent.USER_UPDATED, self.session)
        return current


class FakeGateway:
    def __init__(self, auth: Optional[FakeAuth] = None, db: Optional[FakeDatabase] = None):
        self.auth = auth or FakeAuth()
        self.db = db or FakeDatabase()
        self.closed = False

    def table(self, name: str) -> QueryBuilder:
        return QueryBuilder(name, self.db)

    async def aclose(self) -> None:
        self.closed = True


def _at(day: int) -> str:
    return (BASE_TIME + timedelta(days=day)).isoformat()


def seed_catalog(gateway: FakeGateway) -> FakeGateway:
    """Two users, two categories and four prompts (one private per author)."""
    gateway.auth.add_user("ada@example.com", "secret1", full_name="Ada Lovelace", user_id=ADA_ID)
    gateway.auth.add_user("bob@example.com", "secret2", full_name="Bob Stone", user_id=BOB_ID)

    gateway.db.seed(
        "categories",
        {"id": "cat-writing", "name": "Writing", "description": "Emails, posts and stories"},
        {"id": "cat-code", "name": "Coding", "description": None},
    )
    gateway.db.seed(
        "profiles",
        {"id": ADA_ID, "username": "ada", "full_name": "Ada Lovelace", "created_at": _at(0)},
    )
    gateway.db.seed(
        "prompts",
        {
            "id": "p-email",
            "title": "Cold email opener",
            "description": "Short outreach emails",
            "content": "Write a cold email to {name} about {product}.",
            "category_id": "cat-writing",
            "author_id": ADA_ID,
            "tags": ["email", "sales"],
            "likes_count": 3,
            "views_count": 10,
            "created_at": _at(1),
        },
        {
            "id": "p-sql",
            "title": "SQL explainer",
            "description": "Explain a query step by step",
            "content": "Explain this SQL query: {query}",
            "category_id": "cat-code",
            "author_id": BOB_ID,
            "likes_count": 5,
            "views_count": 2,
            "created_at": _at(2),
        },
        {
            "id": "p-ada-private",
            "title": "Private notes",
            "content": "Summarize my notes",
            "category_id": "cat-writing",
            "author_id": ADA_ID,
            "is_public": False,
            "created_at": _at(3),
        },
        {
            "id": "p-bob-private",
            "title": "Bob's draft",
            "content": "Not ready yet",
            "author_id": BOB_ID,
            "is_public": False,
            "created_at": _at(4),
        },
    )
    return gateway


@pytest.fixture
def gateway() -> FakeGateway:
    """Fake gateway seeded with users, categories and prompts, nobody signed in."""
    return seed_catalog(FakeGateway())


@pytest.fixture
def ada(gateway: FakeGateway) -> Identity:
    return gateway.auth.users["ada@example.com"][1]


@pytest.fixture
def bob(gateway: FakeGateway) -> Identity:
    return gateway.auth.users["bob@example.com"][1]
