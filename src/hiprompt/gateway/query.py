"""
Table query builder and PostgREST executor.

The builder collects a declarative QuerySpec; an executor turns the spec
into one round trip. Cardinality (single / maybe_single) is applied on the
rows the executor returns, so every executor behaves the same way.

Usage:
    rows = await (
        gateway.table("prompts")
        .select("*, categories(name)")
        .eq("is_public", True)
        .or_(Filter("title", "ilike", "%sql%"), Filter("description", "ilike", "%sql%"))
        .order("created_at", desc=True)
        .execute()
    )

PostgREST mapping:
- filters become query params: column=op.value
- or-groups become or=(col.op.value,col.op.value)
- order becomes order=col.desc,col2.asc
- insert/update/delete send Prefer: return=representation
- count() sends Prefer: count=exact and reads the Content-Range total
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Literal, Optional, Protocol, Union

import httpx
from loguru import logger

from ..errors import NO_ROWS_CODE, GatewayError

Method = Literal["select", "insert", "update", "delete"]
Cardinality = Literal["many", "single", "maybe_single"]

OPERATORS = {"eq", "neq", "gt", "gte", "lt", "lte", "like", "ilike", "is", "in"}

# Characters that must be quoted inside PostgREST list/or expressions
_RESERVED = set(',()":')


def _format_value(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _quote(value: str) -> str:
    if any(ch in _RESERVED for ch in value):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return value


@dataclass(frozen=True)
class Filter:
    """One column condition: column <op> value."""

    column: str
    op: str
    value: Any

    def __post_init__(self):
        if self.op not in OPERATORS:
            raise ValueError(f"Unsupported filter operator: {self.op}")

    def operand(self, quoted: bool = False) -> str:
        if self.op == "in":
            values = ",".join(_quote(_format_value(v)) for v in self.value)
            return f"in.({values})"
        text = _format_value(self.value)
        return f"{self.op}.{_quote(text) if quoted else text}"

    def expression(self) -> str:
        """Form used inside or=(...) groups."""
        return f"{self.column}.{self.operand(quoted=True)}"


@dataclass(frozen=True)
class OrFilter:
    """Rows matching any of the member filters."""

    filters: tuple[Filter, ...]

    def expression(self) -> str:
        return "(" + ",".join(f.expression() for f in self.filters) + ")"


@dataclass
class QuerySpec:
    """Everything one table call needs, independent of the transport."""

    table: str
    method: Method = "select"
    columns: str = "*"
    filters: list[Union[Filter, OrFilter]] = field(default_factory=list)
    orders: list[tuple[str, bool]] = field(default_factory=list)
    limit: Optional[int] = None
    payload: Any = None
    count: bool = False
    cardinality: Cardinality = "many"

    def to_params(self) -> list[tuple[str, str]]:
        params: list[tuple[str, str]] = [("select", self.columns)]
        for item in self.filters:
            if isinstance(item, OrFilter):
                params.append(("or", item.expression()))
            else:
                params.append((item.column, item.operand()))
        if self.orders:
            params.append(
                ("order", ",".join(f"{col}.{'desc' if desc else 'asc'}" for col, desc in self.orders))
            )
        if self.limit is not None:
            params.append(("limit", str(self.limit)))
        return params


@dataclass
class QueryResponse:
    """Rows returned by a table call (data is a row dict for single())."""

    data: Any
    count: Optional[int] = None


class QueryExecutor(Protocol):
    """Runs a QuerySpec and returns the matching rows."""

    async def run(self, spec: QuerySpec) -> tuple[list[dict], Optional[int]]:
        ...


class QueryBuilder:
    """Chainable table query. Every method returns the builder itself."""

    def __init__(self, table: str, executor: QueryExecutor):
        self.spec = QuerySpec(table=table)
        self._executor = executor

    # Operations

    def select(self, columns: str = "*") -> "QueryBuilder":
        if self.spec.payload is None and self.spec.method != "delete":
            self.spec.method = "select"
        self.spec.columns = columns
        return self

    def insert(self, row: Union[dict, list[dict]]) -> "QueryBuilder":
        self.spec.method = "insert"
        self.spec.payload = row
        return self

    def update(self, patch: dict) -> "QueryBuilder":
        self.spec.method = "update"
        self.spec.payload = patch
        return self

    def delete(self) -> "QueryBuilder":
        self.spec.method = "delete"
        return self

    # Filters

    def filter(self, column: str, op: str, value: Any) -> "QueryBuilder":
        self.spec.filters.append(Filter(column, op, value))
        return self

    def eq(self, column: str, value: Any) -> "QueryBuilder":
        return self.filter(column, "eq", value)

    def neq(self, column: str, value: Any) -> "QueryBuilder":
        return self.filter(column, "neq", value)

    def gt(self, column: str, value: Any) -> "QueryBuilder":
        return self.filter(column, "gt", value)

    def gte(self, column: str, value: Any) -> "QueryBuilder":
        return self.filter(column, "gte", value)

    def lt(self, column: str, value: Any) -> "QueryBuilder":
        return self.filter(column, "lt", value)

    def lte(self, column: str, value: Any) -> "QueryBuilder":
        return self.filter(column, "lte", value)

    def like(self, column: str, pattern: str) -> "QueryBuilder":
        return self.filter(column, "like", pattern)

    def ilike(self, column: str, pattern: str) -> "QueryBuilder":
        return self.filter(column, "ilike", pattern)

    def is_(self, column: str, value: Any) -> "QueryBuilder":
        return self.filter(column, "is", value)

    def in_(self, column: str, values: list[Any]) -> "QueryBuilder":
        return self.filter(column, "in", list(values))

    def or_(self, *filters: Filter) -> "QueryBuilder":
        if filters:
            self.spec.filters.append(OrFilter(tuple(filters)))
        return self

    # Modifiers

    def order(self, column: str, desc: bool = False) -> "QueryBuilder":
        self.spec.orders.append((column, desc))
        return self

    def limit(self, count: int) -> "QueryBuilder":
        self.spec.limit = count
        return self

    def count(self) -> "QueryBuilder":
        self.spec.count = True
        return self

    def single(self) -> "QueryBuilder":
        self.spec.cardinality = "single"
        return self

    def maybe_single(self) -> "QueryBuilder":
        self.spec.cardinality = "maybe_single"
        return self

    async def execute(self) -> QueryResponse:
        """
        Run the query.

        Raises:
            GatewayError: error response, transport failure, or single()
                matching zero or several rows (code PGRST116)
        """
        rows, total = await self._executor.run(self.spec)
        cardinality = self.spec.cardinality

        if cardinality == "many":
            return QueryResponse(data=rows, count=total)

        if len(rows) > 1 or (cardinality == "single" and not rows):
            raise GatewayError(
                f"JSON object requested, multiple (or no) rows returned ({len(rows)})",
                status=406,
                code=NO_ROWS_CODE,
            )
        return QueryResponse(data=rows[0] if rows else None, count=total)


def _parse_count(content_range: Optional[str]) -> Optional[int]:
    # Content-Range: 0-24/3573 or */0
    if not content_range or "/" not in content_range:
        return None
    total = content_range.rsplit("/", 1)[1]
    return int(total) if total.isdigit() else None


def error_from_response(response: httpx.Response, error_class: type = GatewayError) -> GatewayError:
    """Build a GatewayError from a PostgREST/GoTrue error body."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        message = (
            body.get("message")
            or body.get("msg")
            or body.get("error_description")
            or body.get("error")
            or response.reason_phrase
        )
        code = body.get("code") or body.get("error_code") or body.get("error")
    else:
        message = response.text or response.reason_phrase
        code = None

    return error_class(str(message), status=response.status_code, code=str(code) if code else None, details=body)


class PostgrestExecutor:
    """
    Executes QuerySpecs against PostgREST (/rest/v1).

    Requests run with the anon key as apikey and the signed-in user's JWT
    as bearer token, so row-level security applies to every call. The token
    provider is awaited per request and may refresh an expiring session.
    """

    _HTTP_METHODS = {"select": "GET", "insert": "POST", "update": "PATCH", "delete": "DELETE"}

    def __init__(
        self,
        http: httpx.AsyncClient,
        rest_url: str,
        api_key: str,
        token_provider: Callable[[], Awaitable[Optional[str]]],
    ):
        self.http = http
        self.rest_url = rest_url.rstrip("/")
        self.api_key = api_key
        self.token_provider = token_provider

    def _headers(self, spec: QuerySpec, token: Optional[str]) -> dict[str, str]:
        prefer = []
        if spec.method != "select":
            prefer.append("return=representation")
        if spec.count:
            prefer.append("count=exact")

        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {token or self.api_key}",
            "Accept": "application/json",
        }
        if prefer:
            headers["Prefer"] = ",".join(prefer)
        if spec.payload is not None:
            headers["Content-Type"] = "application/json"
        return headers

    async def run(self, spec: QuerySpec) -> tuple[list[dict], Optional[int]]:
        method = self._HTTP_METHODS[spec.method]
        url = f"{self.rest_url}/{spec.table}"
        logger.debug(f"{method} {spec.table} params={spec.to_params()}")
        # May refresh the session; auth failures surface as GatewayError too
        token = await self.token_provider()

        try:
            response = await self.http.request(
                method,
                url,
                params=spec.to_params(),
                headers=self._headers(spec, token),
                json=spec.payload,
            )
        except httpx.HTTPError as e:
            logger.warning(f"Transport error on {method} {spec.table}: {e}")
            raise GatewayError(f"Network error: {e}") from e

        if response.status_code >= 400:
            error = error_from_response(response)
            logger.warning(f"{method} {spec.table} failed: {error!r}")
            raise error

        data = response.json() if response.content else []
        rows = data if isinstance(data, list) else [data]
        return rows, _parse_count(response.headers.get("content-range"))
