"""Helpers shared by the data services."""

from ..errors import NO_ROWS_CODE, DataError, DataErrorKind, GatewayError

# Postgres SQLSTATE codes surfaced by PostgREST
_UNIQUE_VIOLATION = "23505"
_RLS_VIOLATION = "42501"


def data_error_from(error: GatewayError, action: str) -> DataError:
    """Classify a gateway failure on a table call."""
    if error.is_transport:
        return DataError(DataErrorKind.NETWORK, f"Could not {action}: network error")
    if error.code == NO_ROWS_CODE:
        return DataError(DataErrorKind.NOT_FOUND, f"Could not {action}: not found")
    if error.code == _RLS_VIOLATION or error.status in (401, 403):
        return DataError(DataErrorKind.FORBIDDEN, f"Could not {action}: permission denied")
    if error.code == _UNIQUE_VIOLATION or error.status == 409:
        return DataError(DataErrorKind.CONFLICT, f"Could not {action}: already exists")
    if error.status == 400:
        return DataError(DataErrorKind.INVALID, f"Could not {action}: {error.message}")
    return DataError(DataErrorKind.QUERY, f"Could not {action}: {error.message}")
