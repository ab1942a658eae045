# core/supabase_helpers.py

from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from supabase import Client

from core.utils import sanitize
from core.errors import ExternalFailure, supabase_error


# =================================================================
#  SAFE SELECT / INSERT / UPDATE / UPSERT / COUNT
# =================================================================
# Every store in services/ goes through these helpers so that:
#   - payloads are sanitized the same way
#   - client exceptions always surface as ExternalFailure
# They are NOT used for auth.users (see services/identity.py).
# =================================================================

def require_client(client: Optional[Client]) -> Client:
    if client is None:
        raise ExternalFailure("Supabase client not configured")
    return client


def _apply_filters(query, filters: Optional[Dict[str, Any]], any_of: Optional[str] = None):
    for key, val in (filters or {}).items():
        query = query.eq(key, val)
    # PostgREST "or" syntax, e.g. "is_super_admin.eq.true,role.eq.super-admin"
    if any_of:
        query = query.or_(any_of)
    return query


def safe_select(
    client: Optional[Client],
    table: str,
    filters: Optional[Dict[str, Any]] = None,
    *,
    single: bool = False,
    order_by: Optional[str] = None,
    desc: bool = False,
    any_of: Optional[str] = None,
):
    """
    Table SELECT.
    single=True returns the first matching row or None, otherwise a list.
    """
    client = require_client(client)

    try:
        query = _apply_filters(client.table(table).select("*"), filters, any_of)
        if order_by:
            query = query.order(order_by, desc=desc)
        if single:
            query = query.limit(1)

        result = query.execute()
        rows = result.data or []

    except Exception as e:
        supabase_error(e, f"Failed to fetch from {table}")

    if single:
        return rows[0] if rows else None
    return rows


def safe_insert(client: Optional[Client], table: str, data: dict) -> Optional[dict]:
    """INSERT returning the stored row."""
    client = require_client(client)
    cleaned = sanitize(data)

    try:
        result = (
            client.table(table)
            .insert(cleaned, returning="representation")
            .execute()
        )
    except Exception as e:
        supabase_error(e, f"Failed to insert into {table}")

    return result.data[0] if result.data else None


def safe_upsert(
    client: Optional[Client],
    table: str,
    data: dict,
    on_conflict: str,
) -> Optional[dict]:
    """UPSERT keyed on `on_conflict`, returning the stored row."""
    client = require_client(client)
    cleaned = sanitize(data)

    try:
        result = (
            client.table(table)
            .upsert(cleaned, on_conflict=on_conflict, returning="representation")
            .execute()
        )
    except Exception as e:
        supabase_error(e, f"Failed to upsert into {table}")

    return result.data[0] if result.data else None


def safe_update(
    client: Optional[Client],
    table: str,
    filters: Dict[str, Any],
    data: dict,
) -> Optional[dict]:
    """
    UPDATE ... WHERE <every filter matches>.

    Returns the first updated row, or None when no row matched. Callers use
    the None case to detect compare-and-swap conflicts.
    """
    client = require_client(client)
    cleaned = sanitize(data)

    try:
        query = _apply_filters(
            client.table(table).update(cleaned, returning="representation"),
            filters,
        )
        result = query.execute()
    except Exception as e:
        supabase_error(e, f"Failed to update {table}")

    return result.data[0] if result.data else None


def safe_count(
    client: Optional[Client],
    table: str,
    filters: Optional[Dict[str, Any]] = None,
    any_of: Optional[str] = None,
) -> int:
    """Exact row count for the filtered table."""
    client = require_client(client)

    try:
        query = _apply_filters(client.table(table).select("*", count="exact"), filters, any_of)
        result = query.limit(1).execute()
    except Exception as e:
        supabase_error(e, f"Failed to count {table}")

    return result.count or 0


def row_to_model(row: dict, model, table: str):
    """Parse one stored row. A row the model rejects is a data problem, not bad input."""
    try:
        return model.model_validate(row)
    except ValidationError as e:
        raise ExternalFailure(f"Unreadable row in {table}: {e.errors()[0]['msg']}") from e


def rows_to_models(rows: List[dict], model, table: str) -> list:
    return [row_to_model(row, model, table) for row in rows]
