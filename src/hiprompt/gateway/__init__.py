"""
Remote Data Gateway

Client for the hosted backend (Supabase):
- AuthClient: password auth, persisted sessions, auth-state notifications
- QueryBuilder / PostgrestExecutor: table select/insert/update/delete
- SupabaseGateway: both over one httpx.AsyncClient
- create_gateway(): builds the gateway from settings, raising
  ConfigurationError when credentials are missing
"""

from .auth import AuthClient
from .base import AuthGateway, Gateway, SignUpResponse, Subscription
from .client import SupabaseGateway, create_gateway
from .query import Filter, OrFilter, PostgrestExecutor, QueryBuilder, QueryResponse, QuerySpec
from .storage import FileSessionStorage, MemorySessionStorage, SessionStorage

__all__ = [
    "AuthClient",
    "AuthGateway",
    "FileSessionStorage",
    "Filter",
    "Gateway",
    "MemorySessionStorage",
    "OrFilter",
    "PostgrestExecutor",
    "QueryBuilder",
    "QueryResponse",
    "QuerySpec",
    "SessionStorage",
    "SignUpResponse",
    "Subscription",
    "SupabaseGateway",
    "create_gateway",
]
